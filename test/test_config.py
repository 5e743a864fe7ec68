import pytest

from online_rf import ExecutionMode, Param


def test_defaults():
    param = Param(num_classes=3, min_samples=5, min_gain=0.1)
    assert param.gamma == 0.0
    assert param.num_tests == 10
    assert param.lam == 1.0
    assert param.metric == "entropy"


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(lam=10.5),
        dict(lam=0.0),
        dict(num_classes=0),
        dict(gamma=-0.1),
        dict(num_tests=-1),
        dict(min_samples=-1),
        dict(metric="mse"),
    ],
)
def test_invalid_param_fails_fast(kwargs):
    args = dict(num_classes=2, min_samples=5, min_gain=0.1)
    args.update(kwargs)
    with pytest.raises(ValueError):
        Param(**args)


def test_lam_upper_bound_is_inclusive():
    assert Param(num_classes=2, min_samples=5, min_gain=0.1, lam=10).lam == 10


def test_param_is_immutable():
    param = Param(num_classes=2, min_samples=5, min_gain=0.1)
    with pytest.raises(AttributeError):
        param.lam = 2.0


def test_execution_mode():
    assert not ExecutionMode.sequential().is_parallel
    assert not ExecutionMode.parallel(1).is_parallel
    assert ExecutionMode.parallel(4).is_parallel
    with pytest.raises(ValueError):
        ExecutionMode.parallel(0)
