"""Faultline - 未処理例外をHTTPレスポンスへ変換するFastAPIアプリケーション"""
