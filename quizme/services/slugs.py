import re
import secrets

ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
SUFFIX_LENGTH = 8


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def slugify(topic: str) -> str:
    slug = topic.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug[:50]


def generate_quiz_slug(topic: str) -> str:
    return f"{slugify(topic)}-{random_suffix()}"


def generate_attempt_slug() -> str:
    return f"attempt-{random_suffix()}"


def generate_result_slug(topic: str) -> str:
    return f"result-{slugify(topic)}-{random_suffix()}"
