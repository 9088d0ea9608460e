"""
Lexical Analyzer for a C-like Language

Single left-to-right, maximal-munch scanner producing typed and positioned
tokens. Malformed input never raises: illegal lexemes and unterminated
comments or literals come back as ERROR tokens.
"""

from dataclasses import dataclass
from typing import List, Dict, Tuple, Optional, Any
from enum import Enum
import string


class TokenCategory(Enum):
    """Token categories; values are the display names shown to users."""
    ERROR = "ERROR"
    KEYWORD = "KEY_WORD"
    DELIMITER = "DELIMITER"
    OPERATOR = "OPERATOR"
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"
    CHAR = "CHAR"
    STRING = "STRING"
    COMMENT = "COMMENT"
    MULTILINE_COMMENT = "MULTIPLE_LINE_COMMENT"

    @property
    def display_name(self) -> str:
        return self.value


KEYWORDS = frozenset([
    "auto", "double", "int", "struct", "break", "else", "long", "switch",
    "case", "enum", "register", "typedef", "char", "extern", "return", "union",
    "const", "float", "short", "unsigned", "continue", "for", "signed", "void",
    "default", "goto", "sizeof", "volatile", "do", "if", "while", "static",
])

DELIMITERS = (",", ";", "(", ")", "[", "]", "{", "}")

OPERATORS = (
    "+", "-", "*", "/", "%", "++", "--", "<<", ">>", "&", "|", "^", "~", ">",
    "<", ">=", "<=", "!=", "==", "=", "||", "&&", "!", "+=", "-=", "*=", "/=",
    "&=", "|=", "^=", "<<=", ">>=", "->", ".", "sizeof", "?", ":",
)

LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)
ALPHANUMERIC = LETTERS | DIGITS
WORD_CHARS = ALPHANUMERIC | {'_'}

# Largest decimal value (exclusive) accepted after a backslash in a char literal.
CHAR_CODE_LIMIT = 377


@dataclass
class Token:
    """Represents a token produced by the lexical analyzer."""
    category: TokenCategory
    text: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"Token({self.category.display_name}, '{self.text}', line={self.line}, col={self.column})"

    def __repr__(self) -> str:
        return self.__str__()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category.display_name,
            'text': self.text,
            'line': self.line,
            'column': self.column,
        }


class OperatorTrie:
    """Prefix tree over operator and delimiter lexemes for longest-match lookup."""

    def __init__(self, entries: Dict[str, TokenCategory]):
        self._root: Dict[Optional[str], Any] = {}
        for lexeme, category in entries.items():
            node = self._root
            for char in lexeme:
                node = node.setdefault(char, {})
            node[None] = category

    def starts(self, char: str) -> bool:
        return char in self._root

    def longest_match(self, text: str, start: int) -> Optional[Tuple[str, TokenCategory]]:
        """Return the longest lexeme beginning at ``start`` and its category."""
        node = self._root
        best = None
        position = start
        while position < len(text) and text[position] in node:
            node = node[text[position]]
            position += 1
            if None in node:
                best = (text[start:position], node[None])
        return best


def _build_operator_table() -> Dict[str, TokenCategory]:
    table = {delimiter: TokenCategory.DELIMITER for delimiter in DELIMITERS}
    for operator in OPERATORS:
        table[operator] = TokenCategory.OPERATOR
    return table


OPERATOR_TABLE = _build_operator_table()
OPERATOR_TRIE = OperatorTrie(OPERATOR_TABLE)


class LexicalAnalyzer:
    """
    Tokenizes C-like source text.

    Implements maximal-munch scanning and handles:
    - Keywords, identifiers and decimal numbers
    - Line and block comments
    - Delimiters and longest-match operators
    - String and character literals with backslash escapes
    """

    def __init__(self):
        # Most recent category assigned to each distinct lexeme.
        self.recognized: Dict[str, TokenCategory] = {}

    def tokenize(self, source: str) -> List[Token]:
        """
        Tokenize source text.

        Args:
            source: C-like source code

        Returns:
            Tokens in source order, with 1-based line and column numbers
        """
        # The trailing blank guarantees every scan loop stops inside the text.
        text = source + " "
        length = len(text)
        tokens: List[Token] = []
        line = 1
        line_start = 0
        position = 0

        while position < length:
            char = text[position]
            start = position

            if char == '\n':
                line += 1
                position += 1
                line_start = position
                continue

            if char in LETTERS:
                # '_' ends the run as well as any non-alphanumeric character
                position = self._scan_while(text, start + 1, ALPHANUMERIC)
                lexeme = text[start:position]
                category = self._classify_word(lexeme)

            elif char in DIGITS:
                position = self._scan_while(text, start + 1, WORD_CHARS)
                lexeme = text[start:position]
                category = TokenCategory.NUMBER if self._is_number(lexeme) else TokenCategory.ERROR

            elif char == '/' and text[start + 1] == '*':
                end = source.find('*/', start + 2)
                if end == -1:
                    lexeme = source[start:]
                    category = TokenCategory.ERROR
                    position = length
                else:
                    lexeme = source[start + 2:end]
                    category = TokenCategory.MULTILINE_COMMENT
                    position = end + 2

            elif char == '/' and text[start + 1] == '/':
                end = source.find('\n', start + 2)
                if end == -1:
                    end = len(source)
                lexeme = source[start + 2:end]
                category = TokenCategory.COMMENT
                position = end

            elif char in DELIMITERS:
                lexeme = char
                category = TokenCategory.DELIMITER
                position += 1

            elif OPERATOR_TRIE.starts(char):
                lexeme, category = OPERATOR_TRIE.longest_match(text, start)
                position += len(lexeme)

            elif char in ('"', "'"):
                lexeme, category, position = self._scan_quoted(source, text, start)

            else:
                position += 1
                continue

            tokens.append(Token(
                category=category,
                text=lexeme,
                line=line,
                column=start - line_start + 1,
            ))
            self.recognized[lexeme] = category

            consumed = text[start:position]
            if '\n' in consumed:
                line += consumed.count('\n')
                line_start = start + consumed.rfind('\n') + 1

        return tokens

    def summary(self, tokens: List[Token]) -> Dict[str, int]:
        """Count tokens per category, in category declaration order."""
        counts = {category.display_name: 0 for category in TokenCategory}
        for token in tokens:
            counts[token.category.display_name] += 1
        return counts

    def _scan_while(self, text: str, position: int, allowed: frozenset) -> int:
        while position < len(text) and text[position] in allowed:
            position += 1
        return position

    def _scan_quoted(self, source: str, text: str, start: int) -> Tuple[str, TokenCategory, int]:
        """
        Scan a string or character literal opened at ``start``.

        A backslash escapes the following character unconditionally.

        Returns:
            Tuple of (enclosed text, category, position after the literal)
        """
        quote = text[start]
        length = len(text)
        position = start + 1
        while position < length:
            if text[position] == '\\':
                position += 2
                continue
            if text[position] == quote:
                break
            position += 1

        if position >= length:
            return source[start + 1:], TokenCategory.ERROR, length

        content = text[start + 1:position]
        if quote == '"':
            return content, TokenCategory.STRING, position + 1
        return content, self._classify_char(content), position + 1

    def _classify_word(self, lexeme: str) -> TokenCategory:
        if lexeme in KEYWORDS:
            return TokenCategory.KEYWORD
        if self._is_identifier(lexeme):
            return TokenCategory.IDENTIFIER
        return TokenCategory.ERROR

    def _classify_char(self, content: str) -> TokenCategory:
        """
        'a' and '\\n' are characters, as is a backslash followed by a decimal
        code below CHAR_CODE_LIMIT ('\\141'). Anything else is an error.
        """
        if len(content) == 1 or (len(content) == 2 and content[0] == '\\'):
            return TokenCategory.CHAR
        code = content[1:]
        if content.startswith('\\') and self._is_number(code):
            # Leading zeros are insignificant; bound the length before int().
            digits = code.lstrip('0') or '0'
            if len(digits) <= 3 and int(digits) < CHAR_CODE_LIMIT:
                return TokenCategory.CHAR
        return TokenCategory.ERROR

    @staticmethod
    def _is_number(lexeme: str) -> bool:
        return bool(lexeme) and all(char in DIGITS for char in lexeme)

    @staticmethod
    def _is_identifier(lexeme: str) -> bool:
        return (bool(lexeme) and (lexeme[0] in LETTERS or lexeme[0] == '_')
                and all(char in WORD_CHARS for char in lexeme[1:]))


if __name__ == "__main__":
    sample = 'int main() {\n    int ans = 0; // result\n    char c = \'\\141\';\n    return ans;\n}'
    analyzer = LexicalAnalyzer()
    for token in analyzer.tokenize(sample):
        print(token)
