"""
CLI - 命令行工具
"""
