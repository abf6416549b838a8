"""Coercion and text-list helpers"""
