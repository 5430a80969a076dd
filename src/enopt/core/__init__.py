"""
Evaluation bridge, oracle interface and constraint/boundary handling
"""
