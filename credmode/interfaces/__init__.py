"""Data contracts shared across credmode"""
