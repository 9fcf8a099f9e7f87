import re

SEARCH_TERM_MIN_LENGTH = 2


def slugify(text: str) -> str:
    """제목을 URL에 쓸 수 있는 소문자 slug로 변환합니다. (예: 'Hello World!' -> 'hello-world')"""
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text)
    return text.strip("-")


def extract_search_terms(query: str) -> list[str]:
    """
    검색어를 공백 기준으로 나눕니다.
    중복된 단어와 2글자 미만의 단어는 제외하며, 처음 등장한 순서를 유지합니다.
    """
    terms = re.sub(r"\s+", " ", query).strip().split(" ")
    return [
        term
        for term in dict.fromkeys(terms)
        if len(term) >= SEARCH_TERM_MIN_LENGTH
    ]
