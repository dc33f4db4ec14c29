from env_aware_props import KeyValueSource, merge


def test_empty_sources():
    result = merge([])
    assert result.merged == {}
    assert result.key_universe == []
    assert result.fallback_only_keys == set()

def test_first_primary_source_wins():
    a = KeyValueSource.primary("a", {"k": "1"})
    b = KeyValueSource.primary("b", {"k": "2", "only_b": "b"})
    c = KeyValueSource.primary("c", {"k": "3"})
    result = merge([a, b, c])
    assert result.merged["k"] == "1"
    assert result.merged["only_b"] == "b"
    assert result.key_universe == ["k", "only_b"]

def test_primary_beats_fallback_regardless_of_position():
    env = KeyValueSource.fallback("env", {"k": "env", "PATH": "/bin"})
    primary = KeyValueSource.primary("file", {"k": "file"})
    result = merge([env, primary])
    assert result.merged["k"] == "file"
    assert result.fallback_only_keys == {"PATH"}

def test_fallback_order_and_fallback_only_keys():
    props = KeyValueSource.fallback("process-properties", {"user.home": "/home/p", "shared": "props"})
    env = KeyValueSource.fallback("environment", {"shared": "env", "HOME": "/home/e"})
    primary = KeyValueSource.primary("file", {"app": "x"})
    result = merge([primary, props, env])
    assert result.merged["shared"] == "props"
    assert result.fallback_only_keys == {"user.home", "shared", "HOME"}
    assert set(result.key_universe) == {"app", "user.home", "shared", "HOME"}

def test_key_defined_by_primary_is_not_fallback_only():
    primary = KeyValueSource.primary("file", {"PATH": "mine"})
    env = KeyValueSource.fallback("environment", {"PATH": "/bin"})
    result = merge([primary, env])
    assert result.merged["PATH"] == "mine"
    assert "PATH" not in result.fallback_only_keys

def test_sources_are_not_mutated():
    entries = {"k": "v"}
    source = KeyValueSource.primary("a", entries)
    merge([source, KeyValueSource.primary("b", {"k": "other"})])
    assert dict(source.entries) == {"k": "v"}
    entries["k"] = "changed"
    assert source.entries["k"] == "v"
