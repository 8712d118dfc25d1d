"""
Module bảo mật - xác minh captcha cho các endpoint đăng nhập / đăng ký.
"""
