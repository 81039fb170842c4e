"""Document type table tests"""
