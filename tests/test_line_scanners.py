"""
Line Scanner Tests
==================
The opt-in gas_analysis and security_analysis rules report per line.
"""

import textwrap

import pytest

from contract_audit.analyzers.line_scanners import GasAnalysisRule, SecurityAnalysisRule
from contract_audit.model import Category, Severity


def src(text: str) -> str:
    return textwrap.dedent(text).strip("\n")


# ============================================================================
# GAS ANALYSIS
# ============================================================================

class TestGasAnalysisRule:

    @pytest.fixture
    def rule(self):
        return GasAnalysisRule()

    def test_metadata(self, rule):
        assert rule.id == "gas_analysis"
        assert rule.category is Category.GAS_EFFICIENCY

    def test_external_call_names_function(self, rule):
        code = src("""
            function pay(address a) public {
                a.transfer(1);
            }
        """)
        issues = rule.analyze(code)
        assert len(issues) == 1
        assert issues[0].severity is Severity.MEDIUM
        assert issues[0].message == "External call in function 'pay' costs ~2,600 gas"
        assert issues[0].line == 2

    def test_storage_and_loop(self, rule):
        code = src("""
            pub fn deposit(&mut self) {
                self.storage.insert(1);
                while self.pending() {
            }
        """)
        issues = rule.analyze(code)
        assert [(i.line, i.severity) for i in issues] == [
            (2, Severity.LOW),
            (3, Severity.MEDIUM),
        ]
        assert issues[0].message == "Storage operation in function 'deposit' costs ~20,000 gas"
        assert issues[1].message == "Loop in function 'deposit' has variable gas cost"

    def test_assembly_lines_skipped(self, rule):
        code = src("""
            function f() {
                assembly {
                    x.transfer(1)
                }
                y.transfer(2);
            }
        """)
        issues = rule.analyze(code)
        assert [i.line for i in issues] == [5]

    def test_assembly_in_comment_does_not_open_block(self, rule):
        code = src("""
            function f() {
                // no assembly here
                x.transfer(1);
            }
        """)
        assert [i.line for i in rule.analyze(code)] == [3]

    def test_assembly_without_brace_does_not_open_block(self, rule):
        code = src("""
            function f() {
                uint assemblyCount = 1;
                x.transfer(1);
            }
        """)
        assert [i.line for i in rule.analyze(code)] == [3]

    def test_one_line_assembly_block(self, rule):
        code = src("""
            function f() {
                assembly { x.transfer(1) }
                y.transfer(2);
            }
        """)
        assert [i.line for i in rule.analyze(code)] == [3]

    def test_outside_function_ignored(self, rule):
        assert rule.analyze("a.transfer(1);") == []


# ============================================================================
# SECURITY ANALYSIS
# ============================================================================

class TestSecurityAnalysisRule:

    @pytest.fixture
    def rule(self):
        return SecurityAnalysisRule()

    def test_unchecked_call(self, rule):
        issues = rule.analyze("x.transfer(1);")
        assert len(issues) == 1
        assert issues[0].severity is Severity.HIGH
        assert issues[0].message == "Unchecked return value from external call"

    def test_checked_call_same_line(self, rule):
        assert rule.analyze("require(a.transfer(1));") == []

    def test_check_on_other_line_does_not_count(self, rule):
        issues = rule.analyze("require(ok);\nx.transfer(1);")
        assert [i.line for i in issues] == [2]

    def test_arithmetic(self, rule):
        assert [i.message for i in rule.analyze("a = b + c;")] == [
            "Potential integer overflow/underflow"
        ]
        assert rule.analyze("a = b.checked_add(c);") == []

    def test_public_fn_without_access_control(self, rule):
        issues = rule.analyze("pub fn withdraw(&mut self) {")
        assert [(i.severity, i.message) for i in issues] == [
            (Severity.MEDIUM, "Unprotected public function")
        ]

    def test_timestamp(self, rule):
        issues = rule.analyze("let t = now;")
        assert [i.message for i in issues] == ["Timestamp dependency"]

    def test_transfer_in_loop(self, rule):
        issues = rule.analyze("for (i) { a.transfer(1); }")
        assert [i.message for i in issues] == [
            "Unchecked return value from external call",
            "Potential DoS vector in loop with transfers",
        ]
