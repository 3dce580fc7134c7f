"""
Tests for PyTorch integration with neural networks.

These tests verify that inferopt layers and losses train end-to-end
inside ordinary PyTorch models.
"""

import pytest
import numpy as np

try:
    import torch
    import torch.nn as nn
    HAS_TORCH = True
except ImportError:
    HAS_TORCH = False

pytestmark = pytest.mark.skipif(not HAS_TORCH, reason="PyTorch not installed")


@pytest.fixture
def dtype():
    return torch.float64


@pytest.fixture
def classification_data(dtype):
    """Linearly separable 3-class data with one-hot targets."""
    torch.manual_seed(0)
    X = torch.randn(64, 4, dtype=dtype)
    W_true = torch.randn(4, 3, dtype=dtype)
    labels = torch.argmax(X @ W_true, dim=1)
    Y = torch.eye(3, dtype=dtype)[labels]
    return X, Y, labels


def train(model, criterion, X, Y, steps=100, lr=0.5):
    optimizer = torch.optim.SGD(model.parameters(), lr=lr)
    losses = []
    for _ in range(steps):
        optimizer.zero_grad()
        loss = criterion(model(X), Y)
        loss.backward()
        optimizer.step()
        losses.append(loss.item())
    return losses


@pytest.mark.integration
class TestLearningByImitation:
    """Fenchel-Young losses drive a linear model towards the target solutions."""

    def test_soft_argmax_training(self, classification_data, dtype):
        from inferopt import SoftArgmax
        from inferopt.torch import FenchelYoungLossLayer

        X, Y, labels = classification_data
        model = nn.Linear(4, 3).to(dtype)
        losses = train(model, FenchelYoungLossLayer(SoftArgmax()), X, Y)

        assert losses[-1] < 0.5 * losses[0]
        accuracy = (torch.argmax(model(X), dim=1) == labels).double().mean()
        assert accuracy > 0.8

    def test_perturbed_training(self, classification_data, dtype):
        from inferopt import PerturbedAdditive, one_hot_argmax
        from inferopt.torch import FenchelYoungLossLayer

        X, Y, labels = classification_data
        perturbed = PerturbedAdditive(one_hot_argmax, epsilon=0.5, nb_samples=10, seed=0)
        model = nn.Linear(4, 3).to(dtype)
        losses = train(model, FenchelYoungLossLayer(perturbed), X, Y, steps=60, lr=0.2)

        assert np.mean(losses[-5:]) < np.mean(losses[:5])


@pytest.mark.integration
class TestLearningWithObjectives:
    """SPO+ trains from true costs without differentiating the maximizer."""

    def test_spoplus_training(self, path_maximizer, dtype):
        from inferopt.torch import SPOPlusLossLayer

        torch.manual_seed(0)
        X = torch.randn(32, 3, dtype=dtype)
        theta_true = X @ torch.randn(3, 5, dtype=dtype)
        model = nn.Linear(3, 5).to(dtype)
        criterion = SPOPlusLossLayer(path_maximizer)
        optimizer = torch.optim.SGD(model.parameters(), lr=0.05)

        losses = []
        for _ in range(80):
            optimizer.zero_grad()
            loss = criterion(model(X), theta_true)
            loss.backward()
            optimizer.step()
            losses.append(loss.item())

        assert np.mean(losses[-5:]) < np.mean(losses[:5])

    def test_interpolation_in_model(self, dtype):
        """A black-box maximizer inside nn.Sequential receives nonzero gradients."""
        from inferopt import one_hot_argmax
        from inferopt.torch import InterpolationLayer

        torch.manual_seed(0)
        model = nn.Sequential(nn.Linear(4, 3), InterpolationLayer(one_hot_argmax, lambda_=10.0))
        model = model.to(dtype)
        x = torch.randn(8, 4, dtype=dtype)
        cost = torch.tensor([1., 0., 0.], dtype=dtype)

        y = model(x)
        (y * cost).sum().backward()

        assert y.shape == (8, 3)
        assert model[0].weight.grad is not None
        assert torch.all(torch.isfinite(model[0].weight.grad))
