"""
LL(1) Parser Implementation - Grammar Model, FIRST/FOLLOW Sets and Predictive Parsing

This module implements the grammar processing, set computation, table
construction and stack-driven parsing for single-character LL(1) grammars of
the form ``X->alt1|alt2``, where uppercase letters are variables, ``$`` is
the empty string and every other character is a terminal.
"""

from dataclasses import dataclass, field
from typing import List, Set, Dict, Tuple, Optional, Iterator, Any, ClassVar
from enum import Enum

from config import GrammarConfig


class SymbolKind(Enum):
    """Kinds of grammar symbols."""
    EMPTY = "empty"
    VARIABLE = "variable"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class Symbol:
    """
    A single grammar character interned by a SymbolTable.

    Equality and hashing only look at the interned index, so every set and
    dict keyed by Symbol treats one source character as one key.
    """
    index: int
    char: str = field(compare=False)
    kind: SymbolKind = field(compare=False)

    def __str__(self) -> str:
        return self.char

    @property
    def is_terminal(self) -> bool:
        return self.kind is SymbolKind.TERMINAL

    @property
    def is_variable(self) -> bool:
        return self.kind is SymbolKind.VARIABLE

    @property
    def is_empty(self) -> bool:
        return self.kind is SymbolKind.EMPTY


Candidate = Tuple[Symbol, ...]


class SymbolTable:
    """Interns one canonical Symbol per distinct character."""

    def __init__(self):
        self._symbols: Dict[str, Symbol] = {}

    def intern(self, char: str, kind: SymbolKind) -> Symbol:
        """
        Return the canonical Symbol for ``char``.

        The symbol is created with ``kind`` the first time the character is
        seen; later calls return the existing symbol and ignore ``kind``.
        """
        symbol = self._symbols.get(char)
        if symbol is None:
            symbol = Symbol(index=len(self._symbols), char=char, kind=kind)
            self._symbols[char] = symbol
        return symbol

    def lookup(self, char: str) -> Optional[Symbol]:
        return self._symbols.get(char)

    def reset(self):
        """Discard all interned symbols."""
        self._symbols.clear()

    def copy(self) -> 'SymbolTable':
        """Return a table sharing the current symbols whose later additions stay local."""
        table = SymbolTable()
        table._symbols = dict(self._symbols)
        return table

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def __contains__(self, char: str) -> bool:
        return char in self._symbols


class GrammarError(ValueError):
    """Raised when grammar text cannot be turned into productions."""


class MalformedProduction(GrammarError):
    """A grammar line is too short or lacks the ``->`` arrow after its left symbol."""

    def __init__(self, line: str, line_number: int):
        self.line = line
        self.line_number = line_number
        super().__init__(
            f"Cannot parse production '{line}' on line {line_number}: "
            f"expected the form 'X->alternatives'"
        )


class ParseError(ValueError):
    """Base class for input strings the predictive parser rejects."""

    def __init__(self, message: str, trace: Optional[List['TraceStep']] = None):
        super().__init__(message)
        self.trace: List['TraceStep'] = list(trace or [])


class MissingEndMarker(ParseError):
    def __init__(self, input_text: str, end_marker: str):
        self.input_text = input_text
        self.end_marker = end_marker
        super().__init__(f"Input string must end with '{end_marker}'")


class UndefinedNonterminal(ParseError):
    """The symbol on top of the stack has no row in the parsing table."""

    def __init__(self, symbol: Symbol, lookahead: Symbol, trace: List['TraceStep']):
        self.symbol = symbol
        self.lookahead = lookahead
        super().__init__(f"Undefined nonterminal '{symbol}'", trace)


class NoProduction(ParseError):
    """The stack top has a table row but no entry for the current lookahead."""

    def __init__(self, symbol: Symbol, lookahead: Symbol, trace: List['TraceStep']):
        self.symbol = symbol
        self.lookahead = lookahead
        super().__init__(f"Cannot derive '{lookahead}' from '{symbol}'", trace)


@dataclass
class Production:
    """All alternatives of one left-hand variable."""
    left: Symbol
    candidates: List[Candidate] = field(default_factory=list)

    def __str__(self) -> str:
        alternatives = '|'.join(''.join(map(str, c)) for c in self.candidates)
        return f"{self.left}->{alternatives}"


@dataclass
class Grammar:
    """Represents a parsed single-character grammar."""
    productions: List[Production]
    terminals: Set[Symbol]
    symbols: SymbolTable
    empty: Symbol
    end_marker: Symbol
    start_symbol: Optional[Symbol] = None

    def __post_init__(self):
        self._by_left: Dict[Symbol, Production] = {p.left: p for p in self.productions}

    def production_for(self, symbol: Symbol) -> Optional[Production]:
        return self._by_left.get(symbol)

    @property
    def non_terminals(self) -> List[Symbol]:
        return [p.left for p in self.productions]

    def __str__(self) -> str:
        lines = [f"Start Symbol: {self.start_symbol}"]
        lines.append(f"Terminals: {[str(t) for t in sorted(self.terminals, key=symbol_order)]}")
        lines.append(f"Non-terminals: {[str(v) for v in self.non_terminals]}")
        lines.append("Productions:")
        for production in self.productions:
            lines.append(f"  {production}")
        return "\n".join(lines)


def symbol_order(symbol: Symbol) -> Tuple[bool, int]:
    """Sort key: first appearance, with the empty symbol last."""
    return (symbol.is_empty, symbol.index)


class GrammarProcessor:
    """Processes grammar text and creates Grammar objects."""

    def __init__(self, config: Optional[GrammarConfig] = None):
        self.config = config or GrammarConfig()
        self.symbols = SymbolTable()
        self.productions: List[Production] = []
        self.terminals: Set[Symbol] = set()

    def parse_grammar(self, grammar_text: str) -> Grammar:
        """
        Parse grammar text and return a Grammar object.

        Each non-blank line must look like ``X->alt1|alt2|...``. Lines that
        share a left-hand character are merged into one Production, in the
        order the left-hand characters first appear.

        Raises:
            MalformedProduction: a line is shorter than four characters or
                has no ``->`` directly after its left-hand character.
        """
        self._reset()
        empty = self.symbols.intern(self.config.empty, SymbolKind.EMPTY)

        by_left: Dict[Symbol, Production] = {}
        for line_number, line in self._clean_input(grammar_text):
            if len(line) < 4 or line[1:3] != '->':
                raise MalformedProduction(line, line_number)

            left = self.symbols.intern(line[0], SymbolKind.VARIABLE)
            production = by_left.get(left)
            if production is None:
                production = Production(left=left)
                by_left[left] = production
                self.productions.append(production)

            for alternative in line[3:].split('|'):
                production.candidates.append(self._parse_symbols(alternative, empty))

        end_marker = self.symbols.intern(self.config.end_marker, SymbolKind.TERMINAL)
        return Grammar(
            productions=self.productions,
            terminals=self.terminals,
            symbols=self.symbols,
            empty=empty,
            end_marker=end_marker,
            start_symbol=self.symbols.lookup(self.config.start_symbol),
        )

    def _reset(self):
        """Start from a fresh symbol table so no identities leak between grammars."""
        self.symbols = SymbolTable()
        self.productions = []
        self.terminals = set()

    def _clean_input(self, grammar_text: str) -> Iterator[Tuple[int, str]]:
        for line_number, line in enumerate(grammar_text.split('\n'), 1):
            line = line.rstrip('\r')
            if line.strip():
                yield line_number, line

    def _parse_symbols(self, alternative: str, empty: Symbol) -> Candidate:
        # An empty alternative ("S->a|") derives the empty string.
        if not alternative:
            return (empty,)
        candidate = []
        for char in alternative:
            if char == self.config.empty:
                kind = SymbolKind.EMPTY
            elif 'A' <= char <= 'Z':
                kind = SymbolKind.VARIABLE
            else:
                kind = SymbolKind.TERMINAL
            symbol = self.symbols.intern(char, kind)
            if symbol.is_terminal:
                self.terminals.add(symbol)
            candidate.append(symbol)
        return tuple(candidate)


class FirstFollowComputer:
    """
    Computes FIRST and FOLLOW sets through guarded recursion over the grammar.

    Each closure family marks symbols as visited before recursing so cyclic
    grammars terminate. With ``fixpoint`` enabled the families are re-run
    until no set grows; otherwise a single pass is made and a variable whose
    FOLLOW set depends on one still being expanded keeps the partial value.
    """

    def __init__(self, grammar: Grammar, fixpoint: bool = True):
        self.grammar = grammar
        self.fixpoint = fixpoint
        self._first: Dict[Symbol, Set[Symbol]] = {}
        self._follow: Dict[Symbol, Set[Symbol]] = {}
        self._first_string_cache: Dict[Candidate, Set[Symbol]] = {}
        self._visited: Set[Symbol] = set()

    def compute_first_sets(self) -> Dict[Symbol, Set[Symbol]]:
        """
        Compute FIRST sets for every interned symbol.

        Returns:
            Mapping from each symbol to a copy of its FIRST set
        """
        self._first = {symbol: set() for symbol in self.grammar.symbols}
        self._first_string_cache.clear()

        while True:
            before = _total_size(self._first)
            self._visited = set()
            for production in self.grammar.productions:
                self._compute_first(production.left)
            for symbol in self.grammar.symbols:
                self._compute_first(symbol)
            if not self.fixpoint or _total_size(self._first) == before:
                break

        for production in self.grammar.productions:
            for candidate in production.candidates:
                self.first_of_string(candidate)

        return {symbol: set(first) for symbol, first in self._first.items()}

    def compute_follow_sets(self) -> Dict[Symbol, Set[Symbol]]:
        """
        Compute FOLLOW sets for every production's left-hand variable.

        FIRST sets must already be computed.
        """
        self._follow = {p.left: set() for p in self.grammar.productions}

        while True:
            before = _total_size(self._follow)
            self._visited = set()
            for production in self.grammar.productions:
                self._compute_follow(production.left)
            if not self.fixpoint or _total_size(self._follow) == before:
                break

        return {symbol: set(follow) for symbol, follow in self._follow.items()}

    def get_first(self, symbol: Symbol) -> Set[Symbol]:
        """Get FIRST set for a symbol."""
        if symbol not in self._first:
            self._compute_first(symbol)
        return set(self._first[symbol])

    def get_follow(self, symbol: Symbol) -> Set[Symbol]:
        """Get FOLLOW set for a variable (empty for anything without a production)."""
        return set(self._follow.get(symbol, set()))

    def first_of_string(self, symbols: Candidate) -> Set[Symbol]:
        """
        Compute FIRST of a string of symbols.

        FIRST(X1 X2 ... Xn) collects FIRST(Xi) minus the empty symbol while
        every earlier Xi can derive the empty string, and keeps the empty
        symbol only when all of X1..Xn can.
        """
        key = tuple(symbols)
        if key in self._first_string_cache:
            return set(self._first_string_cache[key])

        empty = self.grammar.empty
        result: Set[Symbol] = set()
        if not key:
            result.add(empty)
        for position, symbol in enumerate(key):
            symbol_first = self.get_first(symbol)
            if position + 1 < len(key):
                result.update(symbol_first - {empty})
            else:
                result.update(symbol_first)
            if empty not in symbol_first:
                break

        self._first_string_cache[key] = result
        return set(result)

    def _compute_first(self, symbol: Symbol):
        # Marked on entry: a left-recursive variable sees its own partial set.
        if symbol in self._visited:
            return
        self._visited.add(symbol)

        first = self._first.setdefault(symbol, set())
        if not symbol.is_variable:
            first.add(symbol)
            return

        production = self.grammar.production_for(symbol)
        if production is None:
            return

        empty = self.grammar.empty
        for candidate in production.candidates:
            for position, item in enumerate(candidate):
                self._compute_first(item)
                item_first = self._first[item]
                if item.is_terminal or empty not in item_first:
                    first.update(item_first)
                    break
                if position + 1 == len(candidate):
                    first.update(item_first)
                else:
                    first.update(item_first - {empty})

    def _compute_follow(self, symbol: Symbol):
        if symbol in self._visited:
            return
        self._visited.add(symbol)

        follow = self._follow.setdefault(symbol, set())
        if symbol == self.grammar.start_symbol:
            follow.add(self.grammar.end_marker)

        empty = self.grammar.empty
        for production in self.grammar.productions:
            for candidate in production.candidates:
                for position, item in enumerate(candidate):
                    if item != symbol:
                        continue

                    rest = candidate[position + 1:]
                    if not rest:
                        self._compute_follow(production.left)
                        follow.update(self._follow[production.left])
                        continue

                    following = rest[0]
                    if following.is_terminal:
                        follow.add(following)
                        continue

                    if self.fixpoint:
                        rest_first = self.first_of_string(rest)
                    else:
                        rest_first = self.get_first(following)
                    follow.update(rest_first - {empty})
                    if empty in rest_first:
                        self._compute_follow(production.left)
                        follow.update(self._follow[production.left])


def _total_size(sets: Dict[Symbol, Set[Symbol]]) -> int:
    return sum(len(s) for s in sets.values())


@dataclass
class Conflict:
    """A parsing-table cell that was overwritten by a different candidate."""
    variable: Symbol
    lookahead: Symbol
    replaced: Candidate
    replacement: Candidate

    def __str__(self) -> str:
        old = ''.join(map(str, self.replaced))
        new = ''.join(map(str, self.replacement))
        return (f"LL(1) conflict at [{self.variable}, {self.lookahead}]: "
                f"'{self.variable}->{old}' replaced by '{self.variable}->{new}'")


@dataclass
class ParsingTable:
    """Predictive parsing table: one row per variable, one candidate per cell."""
    cells: Dict[Symbol, Dict[Symbol, Candidate]]
    conflicts: List[Conflict] = field(default_factory=list)

    def row(self, variable: Symbol) -> Optional[Dict[Symbol, Candidate]]:
        return self.cells.get(variable)

    def lookup(self, variable: Symbol, lookahead: Symbol) -> Optional[Candidate]:
        row = self.cells.get(variable)
        if row is None:
            return None
        return row.get(lookahead)

    def __str__(self) -> str:
        lines = ["Parsing Table:"]
        for variable, row in self.cells.items():
            for lookahead, candidate in sorted(row.items(), key=lambda item: symbol_order(item[0])):
                lines.append(f"  M[{variable}, {lookahead}] = {variable}->{''.join(map(str, candidate))}")
        return "\n".join(lines)


class LL1TableGenerator:
    """Derives the LL(1) predictive parsing table from FIRST and FOLLOW sets."""

    def __init__(self, grammar: Grammar, ff_computer: FirstFollowComputer):
        self.grammar = grammar
        self.ff_computer = ff_computer
        self.cells: Dict[Symbol, Dict[Symbol, Candidate]] = {}
        self.conflicts: List[Conflict] = []

    def generate_parsing_table(self) -> ParsingTable:
        """
        Fill M[A, a] for every production A -> alpha.

        - For each terminal a in FIRST(alpha), M[A, a] = alpha
        - If FIRST(alpha) contains the empty symbol, M[A, b] = alpha for
          each b in FOLLOW(A), end marker included

        Later entries overwrite earlier ones in the same cell; every
        overwrite by a different candidate is kept as a Conflict.
        """
        self._reset_table()
        empty = self.grammar.empty

        for production in self.grammar.productions:
            self.cells.setdefault(production.left, {})
            for candidate in production.candidates:
                candidate_first = self.ff_computer.first_of_string(candidate)
                for terminal in sorted(candidate_first, key=symbol_order):
                    if not terminal.is_empty:
                        self._add_entry(production.left, terminal, candidate)
                if empty in candidate_first:
                    follow = self.ff_computer.get_follow(production.left)
                    for terminal in sorted(follow, key=symbol_order):
                        self._add_entry(production.left, terminal, candidate)

        return ParsingTable(cells=self.cells, conflicts=self.conflicts)

    def detect_conflicts(self) -> List[Conflict]:
        return list(self.conflicts)

    def _reset_table(self):
        self.cells = {}
        self.conflicts = []

    def _add_entry(self, variable: Symbol, lookahead: Symbol, candidate: Candidate):
        row = self.cells[variable]
        existing = row.get(lookahead)
        if existing is not None and existing != candidate:
            self.conflicts.append(Conflict(
                variable=variable,
                lookahead=lookahead,
                replaced=existing,
                replacement=candidate,
            ))
        row[lookahead] = candidate


class StepKind(Enum):
    """Kinds of predictive parsing steps."""
    MATCH = "match"
    DERIVE = "derive"
    SUCCESS = "success"
    STUCK = "stuck"


def render_symbols(symbols: Candidate, empty_display: str = 'ε') -> str:
    return ''.join(empty_display if s.is_empty else s.char for s in symbols)


@dataclass
class TraceStep:
    """
    One row of the parsing trace.

    ``stack`` is the analysis stack at the start of the step, top first, so
    the end marker sits at the far end. ``remaining`` is the unconsumed input.
    """
    step_number: int
    stack: Candidate
    remaining: Candidate

    kind: ClassVar[StepKind]

    def stack_text(self, empty_display: str = 'ε') -> str:
        return render_symbols(self.stack, empty_display)

    def remaining_text(self, empty_display: str = 'ε') -> str:
        return render_symbols(self.remaining, empty_display)

    def action_text(self, empty_display: str = 'ε') -> str:
        raise NotImplementedError

    def to_dict(self, empty_display: str = 'ε') -> Dict[str, Any]:
        return {
            'step': self.step_number,
            'kind': self.kind.value,
            'stack': self.stack_text(empty_display),
            'remaining': self.remaining_text(empty_display),
            'action': self.action_text(empty_display),
        }


@dataclass
class MatchStep(TraceStep):
    symbol: Symbol
    kind: ClassVar[StepKind] = StepKind.MATCH

    def action_text(self, empty_display: str = 'ε') -> str:
        return f"match '{self.symbol}'"


@dataclass
class DeriveStep(TraceStep):
    variable: Symbol
    candidate: Candidate
    kind: ClassVar[StepKind] = StepKind.DERIVE

    def action_text(self, empty_display: str = 'ε') -> str:
        return f"{self.variable}->{render_symbols(self.candidate, empty_display)}"


@dataclass
class SuccessStep(TraceStep):
    kind: ClassVar[StepKind] = StepKind.SUCCESS

    def action_text(self, empty_display: str = 'ε') -> str:
        return "accept"


@dataclass
class StuckStep(TraceStep):
    symbol: Symbol
    lookahead: Symbol
    kind: ClassVar[StepKind] = StepKind.STUCK

    def action_text(self, empty_display: str = 'ε') -> str:
        return f"error: no entry for [{self.symbol}, {self.lookahead}]"


class LL1ParsingEngine:
    """
    Stack automaton driving input against a predictive parsing table.

    The stack starts as ``[end marker, start symbol]``. Each step either
    matches a terminal, replaces a variable with the candidate chosen by the
    table, accepts, or gets stuck and raises with the trace so far.
    """

    def __init__(self, grammar: Grammar, parsing_table: ParsingTable,
                 config: Optional[GrammarConfig] = None):
        self.grammar = grammar
        self.parsing_table = parsing_table
        self.config = config or GrammarConfig()
        self.last_partial_trace: List[TraceStep] = []

    def parse(self, input_text: str) -> List[TraceStep]:
        """
        Parse an input string.

        Args:
            input_text: Characters to parse, terminated by the end marker

        Returns:
            The full trace, ending in a SuccessStep

        Raises:
            MissingEndMarker: input does not end with the end marker
            UndefinedNonterminal: stack top has no table row
            NoProduction: stack top has no entry for the lookahead
        """
        end_marker = self.grammar.end_marker
        if not input_text.endswith(end_marker.char):
            raise MissingEndMarker(input_text, end_marker.char)

        symbols, start = self._prepare(input_text)
        stack: List[Symbol] = [end_marker, start]
        trace: List[TraceStep] = []
        cursor = 0

        while cursor < len(symbols):
            lookahead = symbols[cursor]
            snapshot = tuple(reversed(stack))
            remaining = tuple(symbols[cursor:])
            step_number = len(trace) + 1

            if len(stack) == 1:
                if remaining == (end_marker,):
                    cursor += 1
                    trace.append(SuccessStep(step_number, snapshot, tuple(symbols[cursor:])))
                    self.last_partial_trace = []
                    return trace
                trace.append(StuckStep(step_number, snapshot, remaining, stack[-1], lookahead))
                raise self._fail(NoProduction(stack[-1], lookahead, trace))

            top = stack.pop()
            if top.is_terminal and top == lookahead:
                trace.append(MatchStep(step_number, snapshot, remaining, top))
                cursor += 1
                continue

            row = self.parsing_table.row(top)
            if row is None:
                trace.append(StuckStep(step_number, snapshot, remaining, top, lookahead))
                raise self._fail(UndefinedNonterminal(top, lookahead, trace))

            candidate = row.get(lookahead)
            if candidate is None:
                trace.append(StuckStep(step_number, snapshot, remaining, top, lookahead))
                raise self._fail(NoProduction(top, lookahead, trace))

            stack.extend(s for s in reversed(candidate) if not s.is_empty)
            trace.append(DeriveStep(step_number, snapshot, remaining, top, candidate))

        # Input ran out while symbols were still waiting on the stack.
        trace.append(StuckStep(len(trace) + 1, tuple(reversed(stack)), (), stack[-1], end_marker))
        raise self._fail(NoProduction(stack[-1], end_marker, trace))

    def _prepare(self, input_text: str) -> Tuple[List[Symbol], Symbol]:
        # Characters the grammar never mentioned are interned into a copy so
        # the grammar's own table is left untouched.
        table = self.grammar.symbols.copy()
        symbols = [table.intern(char, SymbolKind.TERMINAL) for char in input_text]
        start = self.grammar.start_symbol
        if start is None:
            start = table.intern(self.config.start_symbol, SymbolKind.VARIABLE)
        return symbols, start

    def _fail(self, error: ParseError) -> ParseError:
        self.last_partial_trace = list(error.trace)
        return error


class LL1Analyzer:
    """
    Builds every LL(1) artifact for a grammar and parses input against it.

    This is the entry point used by the presentation layer: it loads grammar
    text, exposes FIRST/FOLLOW sets and the parsing table as plain lists and
    dicts, and runs the predictive parser. Each analyzer owns its own symbol
    table, so separate sessions never share state.
    """

    def __init__(self, grammar_text: str = "", config: Optional[GrammarConfig] = None):
        self.config = config or GrammarConfig()
        self.grammar: Optional[Grammar] = None
        self.ff_computer: Optional[FirstFollowComputer] = None
        self.parsing_table: Optional[ParsingTable] = None
        self.parsing_engine: Optional[LL1ParsingEngine] = None
        self.load(grammar_text)

    def load(self, grammar_text: str) -> Grammar:
        """
        Build productions, sets and table for ``grammar_text``.

        A MalformedProduction leaves the previously loaded grammar in place.
        """
        grammar = GrammarProcessor(self.config).parse_grammar(grammar_text)

        ff_computer = FirstFollowComputer(grammar, fixpoint=self.config.fixpoint)
        ff_computer.compute_first_sets()
        ff_computer.compute_follow_sets()

        parsing_table = LL1TableGenerator(grammar, ff_computer).generate_parsing_table()

        self.grammar = grammar
        self.ff_computer = ff_computer
        self.parsing_table = parsing_table
        self.parsing_engine = LL1ParsingEngine(grammar, parsing_table, self.config)
        return grammar

    def productions(self) -> List[str]:
        return [
            f"{p.left}->" + '|'.join(self._render(c) for c in p.candidates)
            for p in self.grammar.productions
        ]

    def first_sets(self) -> List[Dict[str, Any]]:
        """FIRST sets of every variable, in production order."""
        return [
            {'variable': str(p.left), 'set': self._render_set(self.ff_computer.get_first(p.left))}
            for p in self.grammar.productions
        ]

    def follow_sets(self) -> List[Dict[str, Any]]:
        """FOLLOW sets of every variable, in production order."""
        return [
            {'variable': str(p.left), 'set': self._render_set(self.ff_computer.get_follow(p.left))}
            for p in self.grammar.productions
        ]

    def parsing_table_rows(self) -> List[Dict[str, Any]]:
        """Table rows in production order, mapping lookahead text to production text."""
        rows = []
        for variable, row in self.parsing_table.cells.items():
            terminals = {}
            for lookahead in sorted(row, key=symbol_order):
                terminals[str(lookahead)] = f"{variable}->{self._render(row[lookahead])}"
            rows.append({'variable': str(variable), 'terminals': terminals})
        return rows

    def terminals(self) -> List[str]:
        """Grammar terminals in first-appearance order with the end marker last."""
        end_marker = self.grammar.end_marker
        result = [
            str(t) for t in sorted(self.grammar.terminals, key=symbol_order)
            if t != end_marker
        ]
        result.append(str(end_marker))
        return result

    def conflicts(self) -> List[Dict[str, str]]:
        return [
            {
                'variable': str(c.variable),
                'lookahead': str(c.lookahead),
                'replaced': f"{c.variable}->{self._render(c.replaced)}",
                'replacement': f"{c.variable}->{self._render(c.replacement)}",
                'message': str(c),
            }
            for c in self.parsing_table.conflicts
        ]

    def parse(self, input_text: str) -> List[TraceStep]:
        return self.parsing_engine.parse(input_text)

    def last_partial_trace(self) -> List[TraceStep]:
        return list(self.parsing_engine.last_partial_trace)

    def trace_rows(self, trace: List[TraceStep]) -> List[Dict[str, Any]]:
        return [step.to_dict(self.config.empty_display) for step in trace]

    def summary(self) -> Dict[str, Any]:
        """All grammar artifacts in a JSON-friendly dictionary."""
        return {
            'start_symbol': self.config.start_symbol,
            'productions': self.productions(),
            'terminals': self.terminals(),
            'first': self.first_sets(),
            'follow': self.follow_sets(),
            'table': self.parsing_table_rows(),
            'conflicts': self.conflicts(),
        }

    def _render(self, candidate: Candidate) -> str:
        return render_symbols(candidate, self.config.empty_display)

    def _render_set(self, symbols: Set[Symbol]) -> List[str]:
        return [
            self.config.empty_display if s.is_empty else s.char
            for s in sorted(symbols, key=symbol_order)
        ]


if __name__ == "__main__":
    grammar_text = "S->TA\nA->+TA|$\nT->FB\nB->*FB|$\nF->(S)|i"
    analyzer = LL1Analyzer(grammar_text)

    print(analyzer.grammar)
    print()
    for entry in analyzer.first_sets():
        print(f"FIRST({entry['variable']}) = {entry['set']}")
    for entry in analyzer.follow_sets():
        print(f"FOLLOW({entry['variable']}) = {entry['set']}")
    print()
    print(analyzer.parsing_table)
    print()
    for row in analyzer.trace_rows(analyzer.parse("(i+i)*(i+i)#")):
        print(f"{row['step']:>3}  {row['stack']:<14} {row['remaining']:>14}  {row['action']}")
