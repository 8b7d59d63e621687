"""Shallow content-type sniffing for code blocks"""

import re


# Order matters: the first matching rule wins.
LANGUAGE_RULES: list[tuple[str, re.Pattern, re.Pattern | None]] = [
    ('xml',  re.compile(r'<(dependency|dependencies|project|groupId|artifactId|version|scope|plugin)'), None),
    ('html', re.compile(r'<(html|head|body|div|p|span|h[1-6]|ul|ol|li|a|img|script|style)(?=[\s>/])'), None),
    ('xml',  re.compile(r'<[^>]+>'), re.compile(r'</[^>]+>')),
    ('css',  re.compile(r'\{[^}]*\}'), re.compile(r'[a-z-]+:\s*[^;]+;')),
]

JAVA_RE        = re.compile(r'\b(public|private|class|interface)\b')
PYTHON_HINT_RE = re.compile(r'\b(def|import)\b')
JS_RE          = re.compile(r'\b(function|const|let|var|import|export)\b')
PYTHON_RE      = re.compile(r'\b(def|import|class)\b|if __name__')


def detect_language(text: str) -> str:
    """Return one of xml, html, css, java, javascript, python, text."""
    for language, pattern, also in LANGUAGE_RULES:
        if pattern.search(text) and (also is None or also.search(text)):
            return language
    if JAVA_RE.search(text) and not PYTHON_HINT_RE.search(text):
        return 'java'
    if JS_RE.search(text):
        return 'javascript'
    if PYTHON_RE.search(text):
        return 'python'
    return 'text'
