"""
Shared helpers: strkey address encoding and stroop amount formatting.
"""
