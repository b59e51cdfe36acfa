"""Triage domain - symptom analysis and follow-up"""
