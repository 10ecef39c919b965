import ast
import keyword
import re
import unicodedata
from urllib.parse import urlparse

__all__ = (
    'is_url',
    'remove_accents',
    'render_module',
    'sanitize_name_python_keywords',
    'sanitize_parameter_name',
    'to_snake_case',
    'validate_python_syntax',
)

URL_SCHEMES = ('http', 'https')


def is_url(text):
    try:
        result = urlparse(text)
        return result.scheme in URL_SCHEMES and bool(result.netloc)
    except (TypeError, ValueError, AttributeError):
        return False


def remove_accents(input_str):
    nfkd_form = unicodedata.normalize('NFKD', input_str)
    return ''.join(c for c in nfkd_form if not unicodedata.combining(c))


def to_snake_case(name: str) -> str:
    """Split camelCase and PascalCase words with underscores.

    Only the case boundaries are touched; other characters are left for the
    caller's sanitizer.
    """
    s1 = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    return re.sub(r'([a-z\d])([A-Z])', r'\1_\2', s1)


def sanitize_name_python_keywords(name: str) -> str:
    if keyword.iskeyword(name):
        return f'{name}_'
    return name


def sanitize_parameter_name(name: str) -> str:
    """Sanitize a path placeholder name into a valid Python identifier.

    - Replace runs of invalid characters with a single underscore
    - Strip leading and trailing underscores
    - Ensure it doesn't start with a digit
    """
    sanitized = re.sub(r'[^A-Za-z0-9_]+', '_', remove_accents(name.strip()))
    sanitized = re.sub(r'_+', '_', sanitized).strip('_')

    if not sanitized:
        return 'param'
    if sanitized[0].isdigit():
        sanitized = '_' + sanitized
    return sanitized


def validate_python_syntax(content: str, filename: str = '<generated>') -> None:
    """Validate that the content is valid Python code.

    Raises:
        SyntaxError: If the code is not valid Python.
    """
    compile(content, filename, 'exec')


def render_module(body: list[ast.stmt], filename: str = '<generated>') -> str:
    """Render a list of AST statements to Python source.

    This method:
    1. Creates an AST Module from the statements
    2. Fixes missing locations in the AST
    3. Unparses the AST to Python source code
    4. Validates the code by compiling it

    Args:
        body: List of AST statement nodes.
        filename: Name reported in a SyntaxError.

    Returns:
        The module source, terminated by a newline.
    """
    mod = ast.Module(body=body, type_ignores=[])
    ast.fix_missing_locations(mod)

    file_content = ast.unparse(mod) + '\n'

    validate_python_syntax(file_content, filename)
    return file_content
