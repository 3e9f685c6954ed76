"""
Property-based tests using hypothesis for url_lab.

These tests generate random inputs to verify invariants of the encoder,
the escaping helpers and the parse/build pair.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from url_lab.query.encoder import build_query_string
from url_lab.url.builder import build
from url_lab.url.parser import parse
from url_lab.utils.url_utils import classify, urldecode, urlencode

short_text = st.text(max_size=6)
# URL components decode back to Unicode scalars only
component_text = st.text(alphabet=st.characters(blacklist_categories=("Cs",)))

scalars = st.booleans() | st.integers() | short_text
query_values = st.recursive(
    scalars,
    lambda children: st.lists(children, max_size=3)
    | st.dictionaries(short_text, children, max_size=3),
    max_leaves=12,
)
query_roots = st.dictionaries(short_text, query_values, max_size=5)

hosts = st.from_regex(r"[a-z][a-z0-9-]{0,10}(\.[a-z]{2,5}){1,2}", fullmatch=True)


def reversed_order(value):
    """Rebuild every mapping in ``value`` with its insertion order reversed."""
    if isinstance(value, dict):
        return {key: reversed_order(value[key]) for key in reversed(list(value))}
    if isinstance(value, list):
        return [reversed_order(item) for item in value]
    return value


class TestQueryEncoderProperties:
    """Property-based tests for the bracketed query encoder."""

    @given(root=query_roots)
    def test_mapping_order_does_not_matter(self, root):
        """Insertion order of mappings never changes the output."""
        assert build_query_string(root) == build_query_string(reversed_order(root))

    @given(key=short_text, value=st.text())
    def test_single_string_value(self, key, value):
        """A lone string pair is the escaped key and value."""
        assert build_query_string({key: value}) == f"{urlencode(key)}={urlencode(value)}"

    @given(key=short_text, value=st.integers())
    def test_single_number_value(self, key, value):
        assert build_query_string({key: value}) == f"{urlencode(key)}={value}"

    @given(root=query_roots)
    @settings(max_examples=50)
    def test_deterministic(self, root):
        assert build_query_string(root) == build_query_string(root)


class TestEscapingProperties:
    """Property-based tests for query-component escaping."""

    @given(value=st.text())
    def test_decode_inverts_encode(self, value):
        assert urldecode(urlencode(value)) == value

    @given(value=st.text())
    def test_encoded_alphabet(self, value):
        encoded = urlencode(value)
        assert all(c.isascii() and (c.isalnum() or c in "-_.~%+") for c in encoded)

    @given(value=st.text())
    def test_decode_never_raises(self, value):
        assert isinstance(urldecode(value), str)

    @given(value=st.text())
    def test_classify_total(self, value):
        assert classify(value) in {"ip", "domain", "host", "url", "unknown"}


class TestURLProperties:
    """Property-based tests for parsing and building."""

    @given(raw=st.text())
    def test_parse_reports_instead_of_raising(self, raw):
        record, error = parse(raw)
        assert (record is None) != (error is None)

    @given(
        scheme=st.sampled_from(["http", "https", "ftp"]),
        host=hosts,
        username=st.none() | component_text,
        path=component_text,
        fragment=component_text,
    )
    def test_components_survive_build_and_parse(
        self, scheme, host, username, path, fragment
    ):
        url = build(
            scheme=scheme,
            host=host,
            username=username,
            path="/" + path,
            fragment=fragment,
        )
        record, error = parse(url)

        assert error is None
        assert record.scheme == scheme
        assert record.host == host
        assert record.username == username
        assert record.path == "/" + path
        assert record.fragment == fragment
