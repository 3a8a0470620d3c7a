"""
meterbill - water/electricity meter readings to 抄表计费通知单 documents.
"""

__version__ = "0.1.0"
