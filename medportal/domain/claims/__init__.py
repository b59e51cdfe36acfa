"""Claims domain - claim status, appeals and patient records"""
