# tests/utils/test_templating.py

from kubemeter.utils.templating import substitute


def test_substitute_named_and_positional_tokens():
    assert substitute("up{$1}[$step]", {"1": 'node="a"', "step": "1h"}) == 'up{node="a"}[1h]'


def test_substitute_does_not_split_longer_tokens():
    assert substitute("$1 $10", {"1": "one", "10": "ten"}) == "one ten"
    assert substitute("$10", {"1": "one"}) == "$10"


def test_substitute_leaves_unknown_tokens():
    assert substitute('label_replace(up, "ip", "$1", "instance", "(.*)")', {}) == (
        'label_replace(up, "ip", "$1", "instance", "(.*)")'
    )


def test_substituted_text_is_not_rescanned():
    assert substitute("{$1}", {"1": "$2", "2": "x"}) == "{$2}"
