"""Signing services"""
