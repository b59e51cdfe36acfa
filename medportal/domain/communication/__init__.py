"""Communication domain - OTP verification and reminders"""
