import pytest
from hypothesis import given
from hypothesis import strategies as st

from kite.context import KiteContext
from kite.exceptions import FieldMissingError, FunctionError, InvalidPathError, MalformedExpressionError, \
    MissingCaptureError, UnknownFunctionError, UnknownSubFunctionError
from kite.functions import Function, default_additional_functions, default_registry
from kite.processor import ContextProcessor, find_closing, parse_call, split_arguments

no_braces = st.text(alphabet=st.characters(exclude_characters='{}', exclude_categories=('Cs',)))
payloads = st.text(alphabet=st.characters(exclude_categories=('Cs',)))


class Join(Function):
    name = 'Join'

    def apply(self, args, context):
        return '+'.join(args)


class Broken(Function):
    name = 'Broken'

    def apply(self, args, context):
        raise ZeroDivisionError('boom')


@pytest.fixture
def functions():
    registry = default_registry()
    registry.register(Join())
    registry.register(Broken())
    return registry


@pytest.fixture
def processor(context, functions):
    return ContextProcessor(context, functions)


class TestSeedScenarios:
    def test_lookup_field_in_text(self, context, processor):
        context.add_body('cmdA', '{"field":"abc"}')
        assert processor.expand('prefix-{{Lookup(cmdA.field)}}-suffix') == 'prefix-abc-suffix'

    def test_lookup_raw_body(self, context, processor):
        context.add_body('cmdB', 'raw')
        assert processor.expand('{{Lookup(cmdB)}}') == 'raw'

    def test_lookup_with_sub_function(self, context, processor):
        context.add_body('cmdC', '{"x":"hello"}')
        assert processor.expand('{{Lookup(cmdC.x:UpperCase)}}') == 'HELLO'

    def test_two_lookups_in_order(self, context, processor):
        context.add_body('cmdD', 'X')
        context.add_body('cmdE', 'Y')
        assert processor.expand('{{Lookup(cmdD)}}{{Lookup(cmdE)}}') == 'XY'

    def test_override(self, context, processor):
        context.add_body('cmdF', 'first')
        context.add_body('cmdF', 'second')
        assert processor.expand('{{Lookup(cmdF)}}') == 'second'

    def test_missing_capture(self, processor):
        with pytest.raises(MissingCaptureError) as excinfo:
            processor.expand('{{Lookup(ghost)}}')
        assert 'No payload found for ghost' in str(excinfo.value)
        assert excinfo.value.expression == '{{Lookup(ghost)}}'


class TestExpansion:
    def test_nested_lookup(self, context, processor):
        context.add_body('cmdA', '{"field":"abc"}')
        context.add_body('pointer', 'cmdA.field')
        assert processor.expand('{{Lookup({{Lookup(pointer)}})}}') == 'abc'

    def test_nested_lookup_builds_path(self, context, processor):
        context.add_body('order', '{"items":[{"id":"first"},{"id":"second"}]}')
        context.add_body('index', '1')
        assert processor.expand('{{Lookup(order.items[{{Lookup(index)}}].id)}}') == 'second'

    def test_lookup_with_filter_path(self, context, processor):
        context.add_body('order', '{"items":[{"id":"a","name":"first","price":5},'
                                  '{"id":"b","name":"second","price":20}]}')
        assert processor.expand("{{Lookup(order.items[?(@.id=='b')].name)}}") == 'second'
        assert processor.expand('{{Lookup(order.items[?(@.price > 10)].id:UpperCase)}}') == 'B'

    def test_arguments_are_trimmed_and_split(self, processor):
        assert processor.expand('{{Join( a , b,c )}}') == 'a+b+c'

    def test_commas_inside_nested_calls_do_not_split(self, context, processor):
        context.add_body('cmd', 'x,y')
        assert processor.expand('{{Join({{Join(a, b)}}, (c, d), {{Lookup(cmd)}})}}') == 'a+b+(c, d)+x,y'

    def test_empty_argument_list(self, processor):
        assert len(processor.expand('{{Uuid()}}')) == 36

    def test_result_is_not_rescanned(self, context, processor):
        context.add_body('tricky', '{{Lookup(ghost)}}')
        assert processor.expand('{{Lookup(tricky)}}') == '{{Lookup(ghost)}}'

    def test_bare_reference_prefers_variables(self, context, processor):
        context.add_variable('owner', 'alice')
        context.add_body('owner', 'from body')
        context.add_body('cmd', 'body')
        assert processor.expand('{{owner}}/{{ cmd }}') == 'alice/body'

    def test_bare_reference_missing(self, processor):
        with pytest.raises(MissingCaptureError):
            processor.expand('{{nobody}}')

    def test_expand_value(self, context, processor):
        context.add_body('cmd', '{"id":7}')
        value = {'a': ['{{Lookup(cmd.id)}}', 1, None], 'b': {'c': 'plain'}}
        assert processor.expand_value(value) == {'a': ['7', 1, None], 'b': {'c': 'plain'}}

    def test_closing_braces_alone_are_text(self, processor):
        assert processor.expand('a }} b') == 'a }} b'


class TestFailures:
    def test_unknown_function(self, processor):
        with pytest.raises(UnknownFunctionError) as excinfo:
            processor.expand('x {{Nope(a)}}')
        assert excinfo.value.name == 'Nope'
        assert '{{Nope(a)}}' in str(excinfo.value)

    @pytest.mark.parametrize('text', [
        '{{Lookup(a)',
        '{{Lookup(a}}',
        '{{Lookup(a))}}',
        '{{Lookup a)}}',
        '{{(a)}}',
        '{{}}',
        '{{Lookup({{Lookup(a)}}}}',
    ])
    def test_malformed(self, processor, text):
        with pytest.raises(MalformedExpressionError):
            processor.expand(text)

    def test_depth_limit(self, context):
        processor = ContextProcessor(context, max_depth=32)
        text = 'a'
        for _ in range(40):
            text = '{{Lookup(%s)}}' % text
        with pytest.raises(MalformedExpressionError):
            processor.expand(text)

    def test_field_missing(self, context, processor):
        context.add_body('cmd', '{"x": null}')
        with pytest.raises(FieldMissingError):
            processor.expand('{{Lookup(cmd.x)}}')

    def test_invalid_path_on_primitive(self, context, processor):
        context.add_body('cmd', '12')
        with pytest.raises(InvalidPathError):
            processor.expand('{{Lookup(cmd.x)}}')

    def test_unknown_sub_function(self, context, processor):
        context.add_body('cmd', 'v')
        with pytest.raises(UnknownSubFunctionError):
            processor.expand('{{Lookup(cmd:Nope)}}')

    def test_innermost_expression_is_reported(self, context, processor):
        with pytest.raises(MissingCaptureError) as excinfo:
            processor.expand('{{Join(a, {{Lookup(ghost)}})}}')
        assert excinfo.value.expression == '{{Lookup(ghost)}}'

    def test_other_errors_are_wrapped(self, processor):
        with pytest.raises(FunctionError) as excinfo:
            processor.expand('{{Broken()}}')
        assert isinstance(excinfo.value.__cause__, ZeroDivisionError)
        assert excinfo.value.expression == '{{Broken()}}'


class TestParsing:
    def test_find_closing_skips_nested(self):
        text = '{{A({{B()}})}} tail'
        assert text[find_closing(text, 0):] == '}} tail'

    def test_parse_call(self):
        assert parse_call('Lookup(a.b)') == ('Lookup', 'a.b')
        assert parse_call(' Name ') == ('Name', None)
        assert parse_call('F({{G(x)}}, (y))') == ('F', '{{G(x)}}, (y)')

    def test_split_arguments(self):
        assert split_arguments('') == []
        assert split_arguments(' ') == []
        assert split_arguments('a,b') == ['a', 'b']
        assert split_arguments('a,,b') == ['a', '', 'b']
        assert split_arguments('{{F(a,b)}},c') == ['{{F(a,b)}}', 'c']


@given(no_braces)
def test_text_without_templates_is_unchanged(text):
    assert ContextProcessor(KiteContext()).expand(text) == text


@given(payloads)
def test_lookup_returns_captured_body(body):
    context = KiteContext()
    context.add_body('n', body)
    assert ContextProcessor(context).expand('{{Lookup(n)}}') == body


@given(payloads, st.sampled_from([f.name for f in default_additional_functions()]))
def test_lookup_sub_function_matches_direct_apply(body, name):
    context = KiteContext()
    context.add_body('n', body)
    expected = default_additional_functions().find(name).apply(body, name)
    assert ContextProcessor(context).expand('{{Lookup(n:%s)}}' % name) == expected


@given(no_braces, no_braces, no_braces)
def test_expansion_is_idempotent(prefix, body, suffix):
    context = KiteContext()
    context.add_body('n', body)
    processor = ContextProcessor(context)
    once = processor.expand(prefix + '{{Lookup(n)}}' + suffix)
    assert processor.expand(once) == once
