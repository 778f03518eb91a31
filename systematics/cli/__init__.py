"""Systematics command line interface"""
