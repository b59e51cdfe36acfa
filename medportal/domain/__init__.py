"""Domain packages - one per clinical gateway service"""
