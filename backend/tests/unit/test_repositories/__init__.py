"""Data store tests"""
