"""
티어리스트 저장소 계층

모델, 오류, 저장소 인터페이스와 메모리/Supabase 구현
"""
