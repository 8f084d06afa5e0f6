import logging
import math
import pytest
import numpy as np
from rootfinding.brent import Brent
from rootfinding.bracketed import Bisection
from rootfinding.errors import (
    SolverError,
    SolverStatus,
    BracketingFailedError,
    BoundViolationError,
    GuessOutOfRangeError,
    InvalidRangeError,
    MaxEvaluationsExceededError,
    RootNotBracketedError,
)
from rootfinding.settings import SolverSettings
from rootfinding.solver1d import Solver1D, solve_in_bracket, solve_with_step


class Recorder:
    """Objective wrapper that remembers every point it was sampled at"""

    def __init__(self, f):
        self.f = f
        self.calls = []

    def __call__(self, x):
        self.calls.append(x)
        return self.f(x)


def make_solver(**settings) -> Solver1D:
    return Solver1D(Brent(), SolverSettings(**settings))


class TestGuessAndStep:
    """Bracket search from a guess and an initial step"""

    def test_linear_root(self):
        """f(x) = x - 3 from guess 0, step 1"""
        root = make_solver().solve(lambda x: x - 3.0, 1e-10, 0.0, 1.0)
        print(f"root = {root!r}")
        assert abs(root - 3.0) <= 1e-10

    def test_guess_is_already_root(self):
        f = Recorder(lambda x: x - 3.0)
        result = make_solver().run(f, 1e-10, 3.0, 1.0)
        assert result.ok
        assert result.root == 3.0
        assert result.evaluations == 1
        assert f.calls == [3.0]

    def test_endpoint_exact_zero_returned_directly(self):
        """Second sample lands exactly on the root"""
        f = Recorder(lambda x: x - 1.0)
        result = make_solver().run(f, 1e-10, 0.0, 1.0)
        assert result.ok
        assert result.root == 1.0
        assert result.evaluations == 2
        assert f.calls == [0.0, 1.0]

    def test_expands_towards_smaller_value(self):
        """Both initial samples negative: the upper side is grown"""
        f = Recorder(lambda x: x - 3.0)
        make_solver().solve(f, 1e-10, 0.0, 1.0)
        assert f.calls[:2] == [0.0, 1.0]
        assert f.calls[2] == pytest.approx(2.6)
        assert f.calls[3] == pytest.approx(6.76)

    def test_positive_guess_steps_backward(self):
        f = Recorder(lambda x: x - 3.0)
        root = make_solver().solve(f, 1e-10, 5.0, 1.0)
        assert f.calls[:2] == [5.0, 4.0]
        assert abs(root - 3.0) <= 1e-10

    def test_same_root_as_explicit_bracket(self):
        """Monotonic objective: both entry points agree"""
        def f(x):
            return math.exp(x) - 2.0

        solver = make_solver()
        from_step = solver.solve(f, 1e-10, 0.0, 0.5)
        from_bracket = solver.solve_bracketed(f, 1e-10, 0.5, 0.0, 1.0)

        assert from_step == pytest.approx(math.log(2.0), abs=1e-10)
        assert from_bracket == pytest.approx(math.log(2.0), abs=1e-10)
        assert abs(from_step - from_bracket) < 1e-10

    def test_bracketing_failure_reports_last_bracket(self):
        """No real root: x^2 + 1 never changes sign"""
        result = make_solver(max_evaluations=20).run(lambda x: x * x + 1.0, 1e-10, 0.0, 1.0)

        assert result.status is SolverStatus.BRACKETING_FAILED
        assert result.root is None
        assert "unable to bracket root in 20 function evaluations" in result.message
        assert "last bracket attempt: f[" in result.message
        assert result.bracket is not None and result.f_bracket is not None

        with pytest.raises(BracketingFailedError, match="unable to bracket root"):
            result.unwrap()

    def test_flipflop_alternates_sides_on_equal_values(self):
        """Equal |f| at both ends: low side first, then high, and so on"""
        f = Recorder(lambda x: 1.0)
        result = make_solver(max_evaluations=10).run(f, 1e-10, 0.0, 1.0)

        assert result.status is SolverStatus.BRACKETING_FAILED
        assert f.calls[:2] == [0.0, -1.0]
        assert f.calls[2] == pytest.approx(-2.6)
        assert f.calls[3] == pytest.approx(4.16)
        assert f.calls[4] == pytest.approx(-13.416)

        signs = np.sign(f.calls[2:])
        assert list(signs) == [-1.0, 1.0, -1.0, 1.0, -1.0, 1.0]
        # every low-side tie break is charged one extra evaluation
        assert len(f.calls) == 8
        assert result.evaluations == 11

    def test_logs_bracket_handoff(self, caplog):
        caplog.set_level(logging.DEBUG, logger="rootfinding.solver1d")
        make_solver().solve(lambda x: x - 3.0, 1e-10, 0.0, 1.0)
        assert any("Bracketed root" in r.getMessage() for r in caplog.records)


class TestEnforcedBounds:
    """Bound clamping in the search and bound checks on explicit brackets"""

    def test_low_bound_clamps_search(self):
        """Stepping below zero is clamped to the bound itself"""
        f = Recorder(lambda x: x - 0.5)
        root = make_solver(low_bound=0.0).solve(f, 1e-10, 1.0, 2.0)

        print(f"sampled at: {f.calls}")
        assert f.calls[1] == 0.0
        assert min(f.calls) >= 0.0
        assert abs(root - 0.5) <= 1e-10

    def test_hi_bound_never_exceeded(self):
        """Root beyond the hi bound: search stalls at the bound and fails"""
        f = Recorder(lambda x: x - 10.0)
        result = make_solver(hi_bound=5.0).run(f, 1e-10, 0.0, 1.0)

        assert result.status is SolverStatus.BRACKETING_FAILED
        assert max(f.calls) == 5.0
        assert result.bracket[1] == 5.0

    def test_bracket_below_low_bound(self):
        f = Recorder(lambda x: x)
        result = make_solver(low_bound=0.0).run_bracketed(f, 1e-10, 0.5, -1.0, 1.0)

        assert result.status is SolverStatus.BOUND_VIOLATION
        assert "enforced low bound" in result.message
        assert f.calls == []
        with pytest.raises(BoundViolationError):
            result.unwrap()

    def test_bracket_above_hi_bound(self):
        result = make_solver(hi_bound=0.5).run_bracketed(lambda x: x - 0.25, 1e-10, 0.3, 0.0, 1.0)
        assert result.status is SolverStatus.BOUND_VIOLATION
        assert "enforced hi bound" in result.message

    def test_bounds_toggle_independently(self):
        solver = make_solver()
        solver.set_low_bound(0.0)
        assert solver.s.low_bound_enforced and not solver.s.hi_bound_enforced

        solver.set_hi_bound(1.0)
        assert solver.s.hi_bound == 1.0

        solver.set_low_bound(None)
        assert not solver.s.low_bound_enforced and solver.s.hi_bound_enforced

        solver.clear_bounds()
        assert not solver.s.low_bound_enforced and not solver.s.hi_bound_enforced


class TestExplicitBracket:
    """Validation and early returns of the explicit-bracket entry"""

    def test_quadratic(self):
        """x^2 - 4 on [0, 3]: f(0) = -4, f(3) = 5"""
        root = make_solver().solve_bracketed(lambda x: x * x - 4.0, 1e-10, 1.0, 0.0, 3.0)
        assert abs(root - 2.0) < 1e-10
        assert abs(root * root - 4.0) <= 1e-10

    def test_not_bracketed(self):
        result = make_solver().run_bracketed(lambda x: x + 5.0, 1e-10, 1.5, 1.0, 2.0)

        assert result.status is SolverStatus.ROOT_NOT_BRACKETED
        assert "root not bracketed" in result.message
        assert result.evaluations == 2
        with pytest.raises(RootNotBracketedError, match="root not bracketed"):
            result.unwrap()

    def test_reversed_range_fails_before_evaluating(self):
        f = Recorder(lambda x: x - 1.5)
        result = make_solver().run_bracketed(f, 1e-10, 1.5, 2.0, 1.0)

        assert result.status is SolverStatus.INVALID_RANGE
        assert result.evaluations == 0
        assert f.calls == []
        with pytest.raises(InvalidRangeError, match="invalid range"):
            result.unwrap()

    def test_empty_range(self):
        result = make_solver().run_bracketed(lambda x: x, 1e-10, 1.0, 1.0, 1.0)
        assert result.status is SolverStatus.INVALID_RANGE

    @pytest.mark.parametrize("guess, text", [(2.0, ">= xMax"), (1.0, ">= xMax"),
                                             (-0.5, "<= xMin"), (0.0, "<= xMin")])
    def test_guess_out_of_range(self, guess, text):
        f = Recorder(lambda x: x - 0.5)
        result = make_solver().run_bracketed(f, 1e-10, guess, 0.0, 1.0)

        assert result.status is SolverStatus.GUESS_OUT_OF_RANGE
        assert text in result.message
        assert f.calls == []
        with pytest.raises(GuessOutOfRangeError):
            result.unwrap()

    def test_lower_endpoint_is_root(self):
        result = make_solver().run_bracketed(lambda x: x - 1.0, 1e-10, 1.5, 1.0, 2.0)
        assert result.ok
        assert result.root == 1.0
        assert result.evaluations == 1

    def test_upper_endpoint_is_root(self):
        result = make_solver().run_bracketed(lambda x: x - 1.0, 1e-10, 0.5, 0.0, 1.0)
        assert result.ok
        assert result.root == 1.0
        assert result.evaluations == 2

    def test_zero_accuracy_uses_machine_epsilon(self):
        root = make_solver().solve_bracketed(lambda x: x - 3.0, 0.0, 5.0, 0.0, 10.0)
        assert abs(root - 3.0) < 1e-14


class TestBudgetAndResults:
    """Evaluation budget, error types and determinism"""

    def test_refinement_runs_out_of_evaluations(self):
        solver = Solver1D(Bisection(), SolverSettings(max_evaluations=5))
        result = solver.run_bracketed(lambda x: x * x - 4.0, 1e-12, 1.0, 0.0, 3.0)

        assert result.status is SolverStatus.MAX_EVALUATIONS_EXCEEDED
        assert result.evaluations == 6
        assert "maximum number of function evaluations (5) exceeded" in result.message
        with pytest.raises(MaxEvaluationsExceededError):
            solver.solve_bracketed(lambda x: x * x - 4.0, 1e-12, 1.0, 0.0, 3.0)

    def test_solver_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            make_solver().solve_bracketed(lambda x: x + 5.0, 1e-10, 1.5, 1.0, 2.0)

        try:
            make_solver().solve_bracketed(lambda x: x + 5.0, 1e-10, 1.5, 1.0, 2.0)
        except SolverError as exc:
            assert exc.status is SolverStatus.ROOT_NOT_BRACKETED
            assert exc.result.f_bracket == (6.0, 7.0)

    def test_objective_exceptions_propagate(self):
        def f(x):
            raise ZeroDivisionError("model blew up")

        with pytest.raises(ZeroDivisionError, match="model blew up"):
            make_solver().solve(f, 1e-10, 0.0, 1.0)

    def test_repeated_solves_are_identical(self):
        def f(x):
            return x ** 3 - 2.0 * x - 5.0

        first = make_solver().solve(f, 1e-12, 1.0, 0.5)
        second = make_solver().solve(f, 1e-12, 1.0, 0.5)
        solver = make_solver()
        third = solver.solve(f, 1e-12, 1.0, 0.5)
        fourth = solver.solve(f, 1e-12, 1.0, 0.5)

        assert first == second == third == fourth

    def test_function_level_entry_points(self):
        result = solve_with_step(lambda x: x - 3.0, 1e-10, 0.0, 1.0, Brent())
        assert result.ok and result.method == "brent"

        result = solve_in_bracket(lambda x: x - 3.0, 1e-10, 1.0, 0.0, 4.0, Bisection(),
                                  SolverSettings(max_evaluations=200))
        assert result.ok and result.method == "bisection"
        assert abs(result.root - 3.0) <= 1e-10


class TestSettings:

    def test_defaults(self):
        s = SolverSettings()
        assert s.max_evaluations == 100
        assert not s.low_bound_enforced and not s.hi_bound_enforced
        assert s.enforce_bounds(-1e300) == -1e300

    def test_invalid_budget(self):
        with pytest.raises(ValueError, match="max_evaluations"):
            SolverSettings(max_evaluations=0)

    def test_crossed_bounds(self):
        with pytest.raises(ValueError, match="above"):
            SolverSettings(low_bound=1.0, hi_bound=0.0)

    def test_clamping(self):
        s = SolverSettings(low_bound=0.0, hi_bound=1.0)
        assert s.enforce_bounds(-0.5) == 0.0
        assert s.enforce_bounds(1.5) == 1.0
        assert s.enforce_bounds(0.25) == 0.25


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
