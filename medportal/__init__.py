"""EasyMedPro healthcare portal backend"""
