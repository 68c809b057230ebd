import os
import sys
import math
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import MathTools


class MathToolsTestCase(unittest.TestCase):
    def test_clamp(self) -> None:
        self.assertEqual(MathTools.clamp(5, 0, 10), 5)
        self.assertEqual(MathTools.clamp(-1, 0, 10), 0)
        self.assertEqual(MathTools.clamp(11, 0, 10), 10)
        with self.assertRaises(ValueError):
            MathTools.clamp(1, 2, 1)

    def test_round_half_up(self) -> None:
        self.assertEqual(MathTools.round_half_up(22.5), 23)
        self.assertEqual(MathTools.round_half_up(2.5), 3)
        self.assertEqual(MathTools.round_half_up(2.49), 2)
        self.assertEqual(MathTools.round_half_up(0), 0)

    def test_non_negative(self) -> None:
        self.assertEqual(MathTools.non_negative(None), 0)
        self.assertEqual(MathTools.non_negative(-5), 0)
        self.assertEqual(MathTools.non_negative(30), 30)
        self.assertEqual(MathTools.non_negative(12.5), 12.5)
        self.assertEqual(MathTools.non_negative("45"), 45)
        self.assertEqual(MathTools.non_negative("abc"), 0)
        self.assertEqual(MathTools.non_negative(math.nan), 0)
        self.assertEqual(MathTools.non_negative(True), 0)
        self.assertEqual(MathTools.non_negative([1]), 0)

    def test_safe_ratio(self) -> None:
        self.assertAlmostEqual(MathTools.safe_ratio(25, 50), 0.5)
        self.assertEqual(MathTools.safe_ratio(10, 0), 0.0)
        self.assertEqual(MathTools.safe_ratio(10, -3), 0.0)


if __name__ == "__main__":
    unittest.main()
