"""
Test that inferopt can be imported and its public surface is in place.
"""

import pytest


def test_import_inferopt():
    """Verify inferopt package can be imported."""
    import inferopt
    assert hasattr(inferopt, "__version__")


def test_version_format():
    """Verify version string is properly formatted."""
    import inferopt
    version = inferopt.__version__

    # Should be semver format
    parts = version.split(".")
    assert len(parts) >= 2
    assert all(p.isdigit() or "-" in p for p in parts)


def test_import_regularized():
    """Verify simplex predictions and predictor objects can be imported."""
    from inferopt import (
        one_hot_argmax,
        soft_argmax,
        sparse_argmax,
        OneHotArgmax,
        SoftArgmax,
        SparseArgmax,
        RegularizedFrankWolfe,
        RegularizedPredictor,
    )
    assert callable(soft_argmax)
    assert issubclass(SoftArgmax, RegularizedPredictor)
    assert issubclass(RegularizedFrankWolfe, RegularizedPredictor)


def test_import_perturbed():
    """Verify perturbed maximizers can be imported."""
    from inferopt import (
        AbstractPerturbed,
        PerturbedAdditive,
        PerturbedMultiplicative,
        PerturbedComposition,
        compose,
    )
    assert issubclass(PerturbedAdditive, AbstractPerturbed)
    assert issubclass(PerturbedMultiplicative, AbstractPerturbed)
    assert callable(compose)


def test_import_losses():
    """Verify structured losses can be imported."""
    from inferopt import (
        FenchelYoungLoss,
        SPOPlusLoss,
        StructuredSVMLoss,
        BaseLoss,
        ZeroOneBaseLoss,
        Differentiable,
    )
    assert issubclass(FenchelYoungLoss, Differentiable)
    assert issubclass(ZeroOneBaseLoss, BaseLoss)


def test_import_exceptions():
    """Verify exception classes can be imported."""
    from inferopt import (
        InferOptError,
        InvalidConfigError,
        InvalidInputError,
        DimensionError,
        NumericalError,
        OracleFailure,
    )

    # Verify inheritance
    for exc in (InvalidConfigError, InvalidInputError, DimensionError,
                NumericalError, OracleFailure):
        assert issubclass(exc, InferOptError)


def test_exception_messages():
    """Verify exception messages carry their category."""
    from inferopt import InvalidConfigError, DimensionError, OracleFailure

    assert "Invalid configuration" in str(InvalidConfigError("epsilon"))
    assert "Dimension mismatch" in str(DimensionError("(3,) vs (4,)"))
    assert OracleFailure(theta_shape=(3,)).theta_shape == (3,)


def test_info_function():
    """Verify info() function works."""
    import inferopt
    info = inferopt.info()

    assert isinstance(info, str)
    assert "inferopt version" in info
    assert "Python version" in info
    assert "PyTorch" in info
