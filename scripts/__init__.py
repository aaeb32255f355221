"""운영 자동화 스크립트 패키지"""
