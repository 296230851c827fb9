import pytest

from amm_direct.errors import InvalidInput
from amm_direct.fees import estimate_fee, micro_lamports_per_cu, priority_fee_lamports


class TestComputeUnitPrice:
    def test_no_budget_is_zero(self) -> None:
        assert micro_lamports_per_cu(0) == 0
        assert micro_lamports_per_cu(None) == 0
        assert micro_lamports_per_cu(-1) == 0

    def test_spread_over_budget(self) -> None:
        # 0.01 SOL over 300_000 CU = 33.3 micro-lamports
        assert micro_lamports_per_cu(0.01) == 33

    def test_tiny_budget_is_at_least_one(self) -> None:
        assert micro_lamports_per_cu(1e-12) == 1


class TestEstimate:
    def test_zero_priority_fee_means_zero_priority(self) -> None:
        estimate = estimate_fee(5000, 200_000, 0)
        assert estimate.priority_fee_lamports == 0
        assert estimate.total_lamports == 5000
        assert estimate.total_sol == 5000 / 1_000_000_000

    def test_priority_from_consumed_units(self) -> None:
        estimate = estimate_fee(5000, 120_000, 0.01)
        # 120_000 * 33 // 1_000_000
        assert estimate.priority_fee_lamports == 3
        assert estimate.total_lamports == 5003
        assert estimate.micro_lamports_per_cu == 33

    def test_missing_units_or_base(self) -> None:
        estimate = estimate_fee(None, None, 0.01)
        assert estimate.base_fee_lamports == 0
        assert estimate.priority_fee_lamports == 0
        assert priority_fee_lamports(None, 10) == 0

    def test_to_dict_uses_camel_case(self) -> None:
        assert estimate_fee(10, 1000, 0.01).to_dict() == {
            "baseFeeLamports": 10,
            "priorityFeeLamports": 0,
            "totalLamports": 10,
            "totalSol": 10 / 1_000_000_000,
            "unitsConsumed": 1000,
            "microLamportsPerCU": 33,
        }

    @pytest.mark.parametrize("fee", [float("inf"), float("nan")])
    def test_non_finite_budget_rejected(self, fee) -> None:
        with pytest.raises(InvalidInput):
            micro_lamports_per_cu(fee)
