"""Shared helpers: logging and text similarity"""
