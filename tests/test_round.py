import random
import unittest
from collections import Counter

from shape_puzzle.game import FALLBACK_SHAPES, RoundConfig, RoundGenerator, ShapeId


FOUR = [ShapeId.CIRCLE, ShapeId.TRIANGLE, ShapeId.SQUARE, ShapeId.RHOMBUS]


class TestRoundConfig(unittest.TestCase):
    def test_given_empty_active_set_when_resolving_shapes_then_fallback_is_used(self):
        cfg = RoundConfig((), 5)
        self.assertEqual(cfg.effective_shapes(), FALLBACK_SHAPES)
        self.assertEqual(cfg.effective_count(), 3)

    def test_given_count_out_of_range_when_resolving_count_then_clamped(self):
        self.assertEqual(RoundConfig.of(FOUR, 0).effective_count(), 1)
        self.assertEqual(RoundConfig.of(FOUR, -3).effective_count(), 1)
        self.assertEqual(RoundConfig.of(FOUR, 99).effective_count(), 4)
        self.assertEqual(RoundConfig.of(FOUR, 2).effective_count(), 2)

    def test_given_duplicate_shapes_when_resolving_then_each_shape_counted_once(self):
        cfg = RoundConfig.of([ShapeId.CIRCLE, ShapeId.CIRCLE, ShapeId.SQUARE], 5)
        self.assertEqual(cfg.effective_shapes(), (ShapeId.CIRCLE, ShapeId.SQUARE))
        self.assertEqual(cfg.effective_count(), 2)

    def test_given_string_shapes_when_building_config_then_converted_to_ids(self):
        cfg = RoundConfig.of(["circle", "cross"], 2)
        self.assertEqual(cfg.active_shapes, (ShapeId.CIRCLE, ShapeId.CROSS))


class TestRoundGenerator(unittest.TestCase):
    def test_given_many_configs_when_generating_then_lengths_and_permutations_hold(self):
        rng = random.Random(1234)
        gen = RoundGenerator(rng)
        all_shapes = list(ShapeId)
        for _ in range(200):
            active = rng.sample(all_shapes, rng.randint(1, len(all_shapes)))
            count = rng.randint(-1, 8)
            cfg = RoundConfig.of(active, count)
            rnd = gen.generate(cfg)
            expected = max(1, min(count, len(active)))
            self.assertEqual(len(rnd.shapes), expected)
            self.assertEqual(len(set(rnd.shapes)), expected)
            self.assertTrue(set(rnd.shapes) <= set(active))
            self.assertEqual(Counter(rnd.hole_order), Counter(rnd.shapes))
            self.assertEqual(Counter(rnd.tray_order), Counter(rnd.shapes))

    def test_given_four_shapes_and_target_two_when_generating_then_two_shapes_selected(self):
        rnd = RoundGenerator(random.Random(7)).generate(RoundConfig.of(FOUR, 2))
        self.assertEqual(len(rnd), 2)
        self.assertEqual(sorted(rnd.hole_order), sorted(rnd.tray_order))
        for shape in rnd.hole_order:
            self.assertEqual(rnd.tray_order.count(shape), 1)

    def test_given_same_seed_when_generating_then_round_is_reproducible(self):
        cfg = RoundConfig.of(list(ShapeId), 4)
        a = RoundGenerator(random.Random(99)).generate(cfg)
        b = RoundGenerator(random.Random(99)).generate(cfg)
        self.assertEqual(a, b)

    def test_given_truncation_when_generating_repeatedly_then_every_shape_is_sometimes_excluded(self):
        gen = RoundGenerator(random.Random(5))
        cfg = RoundConfig.of(FOUR, 3)
        excluded = Counter()
        for _ in range(400):
            rnd = gen.generate(cfg)
            excluded.update(set(FOUR) - set(rnd.shapes))
        self.assertEqual(set(excluded), set(FOUR))
        # Uniform shuffle: each shape dropped about a quarter of the time
        for shape in FOUR:
            self.assertGreater(excluded[shape], 50)
            self.assertLess(excluded[shape], 150)

    def test_given_generated_round_then_hole_and_tray_orders_are_independent(self):
        gen = RoundGenerator(random.Random(3))
        cfg = RoundConfig.of(list(ShapeId), 6)
        differing = 0
        for _ in range(50):
            rnd = gen.generate(cfg)
            differing += rnd.hole_order != rnd.tray_order
        self.assertGreater(differing, 40)


if __name__ == "__main__":
    unittest.main()
