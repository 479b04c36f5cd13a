import re

from quizme.services.slugs import slugify, generate_quiz_slug, generate_attempt_slug, generate_result_slug


def test_slugify_normalizes_topic():
    assert slugify("  JavaScript: Closures & Scope!  ") == "javascript-closures-scope"


def test_slugify_truncates_long_topics():
    assert len(slugify("word " * 40)) == 50


def test_generated_slugs_carry_random_suffix():
    assert re.fullmatch(r"python-basics-[0-9a-z]{8}", generate_quiz_slug("Python Basics"))
    assert re.fullmatch(r"attempt-[0-9a-z]{8}", generate_attempt_slug())
    assert re.fullmatch(r"result-python-basics-[0-9a-z]{8}", generate_result_slug("Python Basics"))


def test_generated_slugs_differ():
    assert generate_attempt_slug() != generate_attempt_slug()
