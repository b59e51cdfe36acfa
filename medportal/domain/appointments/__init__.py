"""Appointments domain - slot search, booking and telemedicine links"""
