"""
Zoovie Social - friend relationship lifecycle service
"""
__version__ = "1.0.0"
