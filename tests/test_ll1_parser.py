import pytest

from config import GrammarConfig
from ll1_parser import (
    SymbolTable,
    SymbolKind,
    GrammarProcessor,
    FirstFollowComputer,
    LL1TableGenerator,
    LL1Analyzer,
    MalformedProduction,
    MissingEndMarker,
    UndefinedNonterminal,
    NoProduction,
    MatchStep,
    DeriveStep,
    SuccessStep,
    StuckStep,
)

ARITHMETIC = "S->TA\nA->+TA|$\nT->FB\nB->*FB|$\nF->(S)|i"


def as_dict(rows):
    return {row['variable']: set(row['set']) for row in rows}


@pytest.fixture
def analyzer():
    return LL1Analyzer(ARITHMETIC)


# --- Symbol table ---

def test_intern_returns_canonical_symbol():
    table = SymbolTable()
    first = table.intern('a', SymbolKind.TERMINAL)
    again = table.intern('a', SymbolKind.VARIABLE)
    assert first is again
    assert again.kind is SymbolKind.TERMINAL
    assert len(table) == 1


def test_symbols_hash_by_interned_index():
    table = SymbolTable()
    a = table.intern('a', SymbolKind.TERMINAL)
    b = table.intern('b', SymbolKind.TERMINAL)
    assert a != b
    assert {a, table.lookup('a')} == {a}


def test_reset_discards_entries():
    table = SymbolTable()
    table.intern('a', SymbolKind.TERMINAL)
    table.reset()
    assert len(table) == 0
    assert table.lookup('a') is None


def test_copy_keeps_additions_local():
    table = SymbolTable()
    table.intern('a', SymbolKind.TERMINAL)
    local = table.copy()
    local.intern('z', SymbolKind.TERMINAL)
    assert 'z' in local
    assert 'z' not in table
    assert local.lookup('a') is table.lookup('a')


# --- Grammar model ---

def test_parse_grammar_productions_and_terminals():
    grammar = GrammarProcessor().parse_grammar(ARITHMETIC)
    assert [str(p.left) for p in grammar.productions] == ['S', 'A', 'T', 'B', 'F']
    assert {str(t) for t in grammar.terminals} == {'+', '*', '(', ')', 'i'}
    a = grammar.production_for(grammar.symbols.lookup('A'))
    assert len(a.candidates) == 2
    assert a.candidates[1][0].is_empty


def test_lines_with_same_left_symbol_merge():
    grammar = GrammarProcessor().parse_grammar("S->a\nS->b|c")
    assert len(grammar.productions) == 1
    assert [''.join(map(str, c)) for c in grammar.productions[0].candidates] == ['a', 'b', 'c']


def test_symbol_classification():
    grammar = GrammarProcessor().parse_grammar("S->aB$")
    kinds = [s.kind for s in grammar.productions[0].candidates[0]]
    assert kinds == [SymbolKind.TERMINAL, SymbolKind.VARIABLE, SymbolKind.EMPTY]


@pytest.mark.parametrize("text, bad_line, line_number", [
    ("S->", "S->", 1),
    ("S->a\nS=>b", "S=>b", 2),
    ("Sab", "Sab", 1),
    ("S->a\nxy", "xy", 2),
])
def test_malformed_production(text, bad_line, line_number):
    with pytest.raises(MalformedProduction) as excinfo:
        GrammarProcessor().parse_grammar(text)
    assert excinfo.value.line == bad_line
    assert excinfo.value.line_number == line_number


def test_blank_lines_and_crlf_are_ignored():
    grammar = GrammarProcessor().parse_grammar("S->a\r\n\r\nS->b\n")
    assert len(grammar.productions[0].candidates) == 2


def test_each_parse_uses_fresh_symbol_table():
    processor = GrammarProcessor()
    first = processor.parse_grammar("S->a")
    second = processor.parse_grammar("S->b")
    assert first.symbols is not second.symbols
    assert second.symbols.lookup('a') is None


# --- FIRST / FOLLOW ---

def test_first_sets(analyzer):
    assert as_dict(analyzer.first_sets()) == {
        'S': {'(', 'i'},
        'A': {'+', 'ε'},
        'T': {'(', 'i'},
        'B': {'*', 'ε'},
        'F': {'(', 'i'},
    }


def test_follow_sets(analyzer):
    assert as_dict(analyzer.follow_sets()) == {
        'S': {')', '#'},
        'A': {')', '#'},
        'T': {'+', ')', '#'},
        'B': {'+', ')', '#'},
        'F': {'*', '+', ')', '#'},
    }


def test_empty_symbol_listed_last(analyzer):
    first = {row['variable']: row['set'] for row in analyzer.first_sets()}
    assert first['A'] == ['+', 'ε']


def test_follow_of_start_contains_end_marker():
    analyzer = LL1Analyzer("S->aS|b")
    assert '#' in as_dict(analyzer.follow_sets())['S']


def test_first_of_string_keeps_empty_only_when_all_nullable():
    grammar = GrammarProcessor().parse_grammar("S->AB\nA->a|$\nB->b|$")
    computer = FirstFollowComputer(grammar)
    computer.compute_first_sets()
    s = grammar.productions[0]
    first = {str(x) for x in computer.first_of_string(s.candidates[0])}
    assert first == {'a', 'b', '$'}

    a_sym = grammar.symbols.lookup('A')
    c = grammar.symbols.intern('c', SymbolKind.TERMINAL)
    first = {str(x) for x in computer.first_of_string((a_sym, c))}
    assert first == {'a', 'c'}


@pytest.mark.parametrize("text, expected", [
    ("S->$a", {'a'}),
    ("S->$a|b", {'a', 'b'}),
    ("S->a$b", {'a'}),
    ("S->A$\nA->a|$", {'a', 'ε'}),
])
def test_first_looks_past_empty_symbol(text, expected):
    assert as_dict(LL1Analyzer(text).first_sets())['S'] == expected


def test_empty_symbol_inside_candidate_parses():
    analyzer = LL1Analyzer("S->$a")
    table = {row['variable']: row['terminals'] for row in analyzer.parsing_table_rows()}
    assert table['S'] == {'a': 'S->εa'}
    assert isinstance(analyzer.parse("a#")[-1], SuccessStep)


def test_left_recursion_terminates():
    analyzer = LL1Analyzer("E->E+i|i", GrammarConfig(start_symbol='E'))
    assert as_dict(analyzer.first_sets()) == {'E': {'i'}}
    assert as_dict(analyzer.follow_sets()) == {'E': {'+', '#'}}


MUTUAL_FOLLOW = "S->Cx\nA->cB\nB->dA|e\nC->Ah"


def test_single_pass_follow_keeps_snapshot():
    analyzer = LL1Analyzer(MUTUAL_FOLLOW, GrammarConfig(fixpoint=False))
    follow = as_dict(analyzer.follow_sets())
    assert follow['A'] == {'h'}
    assert follow['B'] == set()


def test_fixpoint_follow_converges():
    analyzer = LL1Analyzer(MUTUAL_FOLLOW)
    follow = as_dict(analyzer.follow_sets())
    assert follow['A'] == {'h'}
    assert follow['B'] == {'h'}


def test_fixpoint_follow_looks_past_nullable_symbol():
    text = "S->ABc\nA->a\nB->b|$"
    assert as_dict(LL1Analyzer(text).follow_sets())['A'] == {'b', 'c'}
    legacy = LL1Analyzer(text, GrammarConfig(fixpoint=False))
    assert as_dict(legacy.follow_sets())['A'] == {'b', '#'}


# --- Parsing table ---

def test_parsing_table_cells(analyzer):
    table = {row['variable']: row['terminals'] for row in analyzer.parsing_table_rows()}
    assert table['S'] == {'(': 'S->TA', 'i': 'S->TA'}
    assert table['A'] == {'+': 'A->+TA', ')': 'A->ε', '#': 'A->ε'}
    assert table['B'] == {'+': 'B->ε', '*': 'B->*FB', ')': 'B->ε', '#': 'B->ε'}
    assert table['F'] == {'(': 'F->(S)', 'i': 'F->i'}
    assert analyzer.conflicts() == []


def test_conflicting_cell_keeps_last_write():
    analyzer = LL1Analyzer("S->aA|aB\nA->b\nB->c")
    table = {row['variable']: row['terminals'] for row in analyzer.parsing_table_rows()}
    assert table['S'] == {'a': 'S->aB'}
    conflicts = analyzer.conflicts()
    assert len(conflicts) == 1
    assert conflicts[0]['replaced'] == 'S->aA'
    assert conflicts[0]['replacement'] == 'S->aB'


def test_table_has_one_candidate_per_cell():
    grammar = GrammarProcessor().parse_grammar("S->aA|aB|$\nA->b\nB->c")
    computer = FirstFollowComputer(grammar)
    computer.compute_first_sets()
    computer.compute_follow_sets()
    generator = LL1TableGenerator(grammar, computer)
    table = generator.generate_parsing_table()
    s = grammar.symbols.lookup('S')
    assert len(table.cells[s]) == 2
    assert len(generator.detect_conflicts()) == 1


def test_row_exists_for_variable_without_entries():
    analyzer = LL1Analyzer("S->aX\nX->Yb")
    rows = {row['variable']: row['terminals'] for row in analyzer.parsing_table_rows()}
    assert rows['X'] == {}


def test_terminals_end_with_end_marker(analyzer):
    assert analyzer.terminals() == ['+', '*', '(', ')', 'i', '#']


def test_productions_render_empty_symbol(analyzer):
    assert analyzer.productions()[1] == 'A->+TA|ε'


# --- Predictive parser ---

def test_round_trip_parse(analyzer):
    trace = analyzer.parse("(i+i)*(i+i)#")
    last = trace[-1]
    assert isinstance(last, SuccessStep)
    assert last.remaining_text() == ''
    assert [s.step_number for s in trace] == list(range(1, len(trace) + 1))


def test_trace_rows_start_with_derivation(analyzer):
    trace = analyzer.parse("i#")
    first = trace[0]
    assert isinstance(first, DeriveStep)
    assert first.stack_text() == 'S#'
    assert first.remaining_text() == 'i#'
    assert first.action_text() == 'S->TA'

    rows = analyzer.trace_rows(trace)
    assert [row['kind'] for row in rows] == [
        'derive', 'derive', 'derive', 'match', 'derive', 'derive', 'success'
    ]
    assert rows[3]['stack'] == 'iBA#'
    assert rows[4]['action'] == 'B->ε'


def test_match_step_records_symbol(analyzer):
    trace = analyzer.parse("i#")
    match = next(step for step in trace if isinstance(step, MatchStep))
    assert str(match.symbol) == 'i'


def test_missing_end_marker_leaves_state_untouched(analyzer):
    before = analyzer.summary()
    with pytest.raises(MissingEndMarker):
        analyzer.parse("i+i")
    assert analyzer.summary() == before


def test_no_production_exposes_partial_trace(analyzer):
    with pytest.raises(NoProduction) as excinfo:
        analyzer.parse("i+#")
    error = excinfo.value
    assert str(error.symbol) == 'T'
    assert str(error.lookahead) == '#'
    assert isinstance(error.trace[-1], StuckStep)
    assert analyzer.last_partial_trace() == error.trace


def test_undefined_nonterminal():
    analyzer = LL1Analyzer("S->aX")
    with pytest.raises(UndefinedNonterminal) as excinfo:
        analyzer.parse("ab#")
    assert str(excinfo.value.symbol) == 'X'
    assert analyzer.last_partial_trace()[-1].action_text() == "error: no entry for [X, b]"


def test_missing_start_symbol_is_undefined():
    analyzer = LL1Analyzer("A->a")
    with pytest.raises(UndefinedNonterminal) as excinfo:
        analyzer.parse("a#")
    assert str(excinfo.value.symbol) == 'S'


def test_trailing_input_after_accept_is_rejected():
    analyzer = LL1Analyzer("S->a")
    with pytest.raises(NoProduction) as excinfo:
        analyzer.parse("aa#")
    assert str(excinfo.value.symbol) == '#'
    assert str(excinfo.value.lookahead) == 'a'


def test_input_exhausted_with_symbols_stacked():
    analyzer = LL1Analyzer("S->a#")
    with pytest.raises(NoProduction) as excinfo:
        analyzer.parse("a#")
    error = excinfo.value
    assert str(error.symbol) == '#'
    assert str(error.lookahead) == '#'
    rows = analyzer.trace_rows(error.trace)
    assert [row['kind'] for row in rows] == ['derive', 'match', 'match', 'stuck']
    assert rows[-1]['stack'] == '#'
    assert rows[-1]['remaining'] == ''


def test_unknown_input_characters_do_not_touch_grammar(analyzer):
    with pytest.raises(NoProduction):
        analyzer.parse("z#")
    assert analyzer.grammar.symbols.lookup('z') is None


def test_successful_parse_clears_partial_trace(analyzer):
    with pytest.raises(NoProduction):
        analyzer.parse("+#")
    analyzer.parse("i#")
    assert analyzer.last_partial_trace() == []


# --- Analyzer facade ---

def test_reload_is_idempotent(analyzer):
    before = analyzer.summary()
    analyzer.load(ARITHMETIC)
    assert analyzer.summary() == before


def test_failed_load_keeps_previous_grammar(analyzer):
    before = analyzer.summary()
    with pytest.raises(MalformedProduction):
        analyzer.load("S=>a")
    assert analyzer.summary() == before


def test_empty_grammar():
    analyzer = LL1Analyzer()
    assert analyzer.first_sets() == []
    assert analyzer.terminals() == ['#']
    with pytest.raises(UndefinedNonterminal):
        analyzer.parse("#")


def test_custom_markers():
    config = GrammarConfig(start_symbol='E', end_marker='!', empty_display='eps')
    analyzer = LL1Analyzer("E->aR\nR->bR|$", config)
    assert as_dict(analyzer.follow_sets()) == {'E': {'!'}, 'R': {'!'}}
    assert isinstance(analyzer.parse("abb!")[-1], SuccessStep)
    assert analyzer.productions()[1] == 'R->bR|eps'


def test_trace_rows_use_configured_empty_display():
    config = GrammarConfig(start_symbol='E', end_marker='!', empty_display='eps')
    analyzer = LL1Analyzer("E->aR\nR->bR|$", config)
    with pytest.raises(NoProduction):
        analyzer.parse("$!")
    row = analyzer.trace_rows(analyzer.last_partial_trace())[0]
    assert row['stack'] == 'E!'
    assert row['remaining'] == 'eps!'
