"""Tests for DependencyAnalyzer — end-to-end analysis of C# sources.

Tests cover:
- Concrete-type parameter detection
- Circular dependency detection through the parsed graph
- Missing-registration detection and its settings switch
- Parse warnings and totality on malformed input
- Idempotence
"""

import pytest

from diinspector.core.constants import PARSE_ERROR_WARNING, UNKNOWN_TYPE
from diinspector.core.di import (
    AnalysisResult,
    CircularDependencyIssue,
    ConcreteTypeIssue,
    DependencyAnalyzer,
    IssueKind,
    analyze,
    suggest_registrations,
)
from diinspector.setting import AnalyzerSettings, RegistrationSettings


# ── Fixtures ──────────────────────────────────────────────────────────────

CHECKOUT_APP = '''
namespace Shop
{
    public interface IClock { }
    public interface IMailer { }

    public class CheckoutService
    {
        public CheckoutService(IClock clock, IMailer mailer) { }
    }

    public class InventoryStore
    {
        public InventoryStore() { }
    }

    public class PricingService
    {
        public PricingService(InventoryStore store, int precision) { }
    }

    public class OrderFlow
    {
        public OrderFlow(PaymentFlow payments) { }
    }

    public class PaymentFlow
    {
        public PaymentFlow(OrderFlow orders) { }
    }

    public class Startup
    {
        public void ConfigureServices(IServiceCollection services)
        {
            services.AddScoped<IClock, SystemClock>();
            services.AddSingleton<IMailer, SmtpMailer>();
            services.AddTransient<InventoryStore>();
        }
    }

    public class SystemClock : IClock { }
    public class SmtpMailer : IMailer { }
}
'''


@pytest.fixture
def analyzer():
    return DependencyAnalyzer(settings=AnalyzerSettings())


# ── Tests: Concrete types ─────────────────────────────────────────────────


class TestConcreteTypes:
    def test_class_parameter_flagged(self, analyzer):
        result = analyzer.analyze("class B { }\nclass A { public A(B b) { } }")
        assert len(result.concrete_type_issues) == 1
        issue = result.concrete_type_issues[0]
        assert isinstance(issue, ConcreteTypeIssue)
        assert issue.kind == IssueKind.CONCRETE_TYPE
        assert (issue.class_name, issue.param_type, issue.param_name) == ("A", "B", "b")

    def test_interface_parameter_not_flagged(self, analyzer):
        result = analyzer.analyze("interface IB { }\nclass A { public A(IB b) { } }")
        assert result.concrete_type_issues == []

    def test_name_declared_as_both_is_not_flagged(self, analyzer):
        result = analyzer.analyze("interface B { }\nclass B { }\nclass A { public A(B b) { } }")
        assert result.concrete_type_issues == []

    def test_external_type_not_flagged(self, analyzer):
        result = analyzer.analyze("class A { public A(HttpClient client) { } }")
        assert result.concrete_type_issues == []

    def test_issue_span_covers_parameter(self, analyzer):
        source = "class B { }\nclass A { public A(B b) { } }"
        issue = analyzer.analyze(source).concrete_type_issues[0]
        assert source.encode("utf-8")[issue.start_byte:issue.end_byte] == b"B b"

    def test_checkout_app(self, analyzer):
        result = analyzer.analyze(CHECKOUT_APP)
        flagged = [(i.class_name, i.param_type) for i in result.concrete_type_issues]
        assert flagged == [
            ("PricingService", "InventoryStore"),
            ("OrderFlow", "PaymentFlow"),
            ("PaymentFlow", "OrderFlow"),
        ]


# ── Tests: Cycles ─────────────────────────────────────────────────────────


class TestCircularDependencies:
    def test_two_class_cycle(self, analyzer):
        source = "class ServiceA { public ServiceA(ServiceB b) { } }\nclass ServiceB { public ServiceB(ServiceA a) { } }"
        result = analyzer.analyze(source)
        assert len(result.circular_dependency_issues) == 1
        issue = result.circular_dependency_issues[0]
        assert isinstance(issue, CircularDependencyIssue)
        assert issue.cycle == ["ServiceA", "ServiceB", "ServiceA"]
        assert set(issue.members) == {"ServiceA", "ServiceB"}

    def test_two_class_cycle_reverse_declaration_order(self, analyzer):
        source = "class ServiceB { public ServiceB(ServiceA a) { } }\nclass ServiceA { public ServiceA(ServiceB b) { } }"
        result = analyzer.analyze(source)
        assert len(result.circular_dependency_issues) == 1
        assert set(result.circular_dependency_issues[0].members) == {"ServiceA", "ServiceB"}

    def test_self_dependency(self, analyzer):
        result = analyzer.analyze("class X { public X(X x) { } }")
        assert len(result.circular_dependency_issues) == 1
        issue = result.circular_dependency_issues[0]
        assert issue.cycle == ["X", "X"]
        assert set(issue.members) == {"X"}

    def test_self_dependency_primary_constructor(self, analyzer):
        result = analyzer.analyze("class X(X x) { }")
        assert [c.cycle for c in result.circular_dependency_issues] == [["X", "X"]]

    def test_interfaces_do_not_form_edges(self, analyzer):
        source = (
            "interface IA { }\ninterface IB { }\n"
            "class A : IA { public A(IB b) { } }\nclass B : IB { public B(IA a) { } }"
        )
        result = analyzer.analyze(source)
        assert result.circular_dependency_issues == []
        assert result.dependency_graph == {}

    def test_dependency_graph_exposed(self, analyzer):
        result = analyzer.analyze(CHECKOUT_APP)
        assert result.dependency_graph == {
            "PricingService": ["InventoryStore"],
            "OrderFlow": ["PaymentFlow"],
            "PaymentFlow": ["OrderFlow"],
        }

    def test_zero_parameter_constructor_has_no_edges(self, analyzer):
        result = analyzer.analyze("class Plain { public Plain() { } }")
        assert len(result.constructors) == 1
        assert result.constructors[0].parameters == []
        assert result.concrete_type_issues == []
        assert result.dependency_graph == {}


# ── Tests: Missing registrations ──────────────────────────────────────────


class TestMissingRegistrations:
    def test_unregistered_types_reported(self, analyzer):
        result = analyzer.analyze(CHECKOUT_APP)
        missing = [(i.class_name, i.param_type) for i in result.missing_registration_issues]
        assert missing == [
            ("OrderFlow", "PaymentFlow"),
            ("PaymentFlow", "OrderFlow"),
        ]
        assert all(i.kind == IssueKind.MISSING_REGISTRATION for i in result.missing_registration_issues)

    def test_overlaps_with_concrete_type_issue(self, analyzer):
        result = analyzer.analyze("class B { }\nclass A { public A(B b) { } }")
        assert [i.param_type for i in result.concrete_type_issues] == ["B"]
        assert [i.param_type for i in result.missing_registration_issues] == ["B"]

    def test_predefined_types_ignored(self, analyzer):
        result = analyzer.analyze("class A { public A(string name, int count) { } }")
        assert result.missing_registration_issues == []

    def test_nullable_and_array_predefined_types_ignored(self, analyzer):
        result = analyzer.analyze(
            "class A { public A(string? s, int[] xs, int? n, byte[,] grid, Clock? clock) { } }"
        )
        assert [i.param_type for i in result.missing_registration_issues] == ["Clock?"]

    def test_disabled_by_settings(self):
        settings = AnalyzerSettings(registration=RegistrationSettings(detect_missing=False))
        result = DependencyAnalyzer(settings=settings).analyze(CHECKOUT_APP)
        assert result.missing_registration_issues == []
        assert len(result.concrete_type_issues) == 3


# ── Tests: Robustness ─────────────────────────────────────────────────────


class TestRobustness:
    @pytest.mark.parametrize("source", [
        "",
        "namespace Empty { }",
        "interface IOnly { void Run(); }",
        "public class NoCtor { public void Run() { } }",
    ])
    def test_valid_sources_without_constructors(self, analyzer, source):
        result = analyzer.analyze(source)
        assert isinstance(result, AnalysisResult)
        assert result.constructors == []
        assert result.parse_warnings == []
        assert result.concrete_type_issues == []
        assert result.circular_dependency_issues == []
        assert result.missing_registration_issues == []

    def test_syntax_errors_reported_once(self, analyzer):
        result = analyzer.analyze("public class Broken { public Broken(ILogger logger")
        assert result.parse_warnings == [PARSE_ERROR_WARNING]

    @pytest.mark.parametrize("source", [
        "def main():\n    print('not C#')\n",
        "}}}{{{ ((( <<<>>> ;;;",
        "class \ud800 { }",
        "\x00\x01\x02",
    ])
    def test_never_raises(self, analyzer, source):
        result = analyzer.analyze(source)
        assert isinstance(result, AnalysisResult)

    def test_extraction_failure_becomes_warning(self, analyzer, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("walker exploded")

        monkeypatch.setattr(analyzer._parser, "extract_constructors", boom)
        result = analyzer.analyze("class A { public A() { } }")
        assert result.constructors == []
        assert result.parse_warnings == ["Constructor extraction failed: walker exploded"]

    def test_unknown_type_parameter_kept(self, analyzer, monkeypatch):
        from diinspector.core.ast_parser import csharp_parser

        monkeypatch.setattr(csharp_parser, "resolve_parameter_type", lambda node, source: "")
        result = analyzer.analyze("class A { public A(B b, C c) { } }")
        assert [(p.type, p.name) for p in result.constructors[0].parameters] == [
            (UNKNOWN_TYPE, "b"),
            (UNKNOWN_TYPE, "c"),
        ]
        assert result.concrete_type_issues == []
        assert result.missing_registration_issues == []

    def test_idempotent(self, analyzer):
        assert analyzer.analyze(CHECKOUT_APP) == analyzer.analyze(CHECKOUT_APP)

    def test_long_dependency_chain(self, analyzer):
        source = "\n".join(f"class C{i} {{ public C{i}(C{i + 1} next) {{ }} }}" for i in range(1500))
        source += "\nclass C1500 { public C1500(C0 first) { } }"
        result = analyzer.analyze(source)
        assert result.parse_warnings == []
        assert len(result.constructors) == 1501
        assert len(result.circular_dependency_issues) == 1
        assert result.circular_dependency_issues[0].cycle[0] == "C0"

    def test_cycle_failure_becomes_warning(self, analyzer, monkeypatch):
        from diinspector.core.di import analyzer as analyzer_module

        def boom(graph):
            raise RuntimeError("graph exploded")

        monkeypatch.setattr(analyzer_module, "find_cycles", boom)
        result = analyzer.analyze("class B { }\nclass A { public A(B b) { } }")
        assert result.parse_warnings == ["Cycle detection failed: graph exploded"]
        assert [i.param_type for i in result.concrete_type_issues] == ["B"]
        assert [i.param_type for i in result.missing_registration_issues] == ["B"]


# ── Tests: Module-level API ───────────────────────────────────────────────


class TestModuleApi:
    def test_analyze(self):
        result = analyze("class B { }\nclass A { public A(B b) { } }")
        assert [i.param_type for i in result.concrete_type_issues] == ["B"]

    def test_suggest_registrations(self):
        source = "interface ILogger { }\nclass ConsoleLogger : ILogger { }\nclass OrderService(ILogger logger) { }"
        constructors = analyze(source).constructors
        suggestions = suggest_registrations(constructors, source)
        assert "services.AddScoped<ILogger, ConsoleLogger>();" in suggestions
        assert "services.AddTransient<ConsoleLogger>();" not in suggestions
        assert "services.AddTransient<OrderService>();" in suggestions

