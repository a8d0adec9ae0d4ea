"""
Services built on top of the vendor clients.
"""
