"""
Care Node command-line interface
"""
