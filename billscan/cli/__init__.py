"""Unified command-line interface for billscan.

Usage:
    billscan parse [text_file]
    billscan parse [text_file] --json
    billscan scan <image>
    billscan serve [--host] [--port]
"""
