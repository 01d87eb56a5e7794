"""Tests for extension aggregation."""

import itertools
import logging

from extensions import ExtensionDelta, ExtensionKind, ExtensionSet, MergeMode, Tier, aggregate, fold
from extensions.aggregator import composer_deltas, default_deltas, extensions_from_requires, options_deltas

DEFAULTS = {"bz2", "zlib", "curl", "mcrypt"}


class TestAggregate:
    """Precedence between defaults, options.json and composer.json."""

    def test_defaults_only(self):
        result = aggregate(None, None, {})
        assert result.php == DEFAULTS
        assert result.zend == frozenset()

    def test_options_list_replaces_defaults(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = aggregate(["gd", "mbstring"], None, {})
        assert result.php == {"gd", "mbstring"}
        assert "deprecated" in caplog.text

    def test_empty_options_list_still_replaces(self):
        assert aggregate([], None, {}).php == frozenset()

    def test_composer_extensions_union_with_defaults(self):
        result = aggregate(None, None, {"php": ">=7.1", "ext-curl": "*", "ext-pdo_mysql": "*"})
        assert {"curl", "pdo_mysql", "pdo"} <= result.php
        assert DEFAULTS <= result.php

    def test_composer_extensions_survive_options_replacement(self):
        result = aggregate(["gd"], None, {"ext-intl": "*"})
        assert result.php == {"gd", "intl"}

    def test_zend_extensions_kept_separate(self):
        result = aggregate(None, ["opcache", "xdebug"], {})
        assert result.zend == {"opcache", "xdebug"}
        assert result.php == DEFAULTS

    def test_duplicates_collapse(self):
        result = aggregate(["curl", "curl"], None, {"ext-curl": "*"})
        assert result.php == {"curl"}


class TestExtensionsFromRequires:

    def test_non_extension_keys_ignored(self):
        assert extensions_from_requires(["php", "monolog/monolog", "lib-openssl"]) == frozenset()

    def test_pdo_driver_implies_pdo(self):
        assert extensions_from_requires(["ext-pdo_pgsql"]) == {"pdo_pgsql", "pdo"}


class TestFold:
    """The reducer is independent of input order."""

    def test_order_independent(self):
        deltas = (
            default_deltas()
            + options_deltas(["gd"], ["opcache"])
            + composer_deltas({"ext-pdo_mysql": "*"})
        )
        expected = fold(deltas)
        for perm in itertools.permutations(deltas):
            assert fold(perm) == expected
        assert expected == ExtensionSet(php=frozenset({"gd", "pdo_mysql", "pdo"}), zend=frozenset({"opcache"}))

    def test_union_before_replace_in_input_still_loses_nothing(self):
        union = ExtensionDelta(Tier.COMPOSER, ExtensionKind.PHP, MergeMode.UNION, frozenset({"intl"}))
        replace = ExtensionDelta(Tier.OPTIONS_FILE, ExtensionKind.PHP, MergeMode.REPLACE, frozenset({"gd"}))
        assert fold([union, replace]).php == {"gd", "intl"}


class TestExtensionSetDirectives:

    def test_php_directives_sorted(self):
        ext = ExtensionSet(php=frozenset({"zlib", "bz2"}))
        assert ext.php_directives() == "extension=bz2.so\nextension=zlib.so\n"

    def test_php_directives_with_extra(self):
        ext = ExtensionSet(php=frozenset({"curl"}))
        assert ext.php_directives(["openssl"]) == "extension=curl.so\nextension=openssl.so\n"

    def test_zend_directives(self):
        ext = ExtensionSet(zend=frozenset({"opcache"}))
        assert ext.zend_directives() == "zend_extension=opcache\n"

    def test_empty(self):
        assert ExtensionSet().php_directives() == ""
