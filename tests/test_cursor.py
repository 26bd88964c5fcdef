import unittest

from byteringbuffer.cursor import ByteCursor


class TestByteCursor(unittest.TestCase):
    def test_allocate(self):
        cursor = ByteCursor.allocate(4)
        self.assertEqual(cursor.capacity, 4)
        self.assertEqual(cursor.position, 0)
        self.assertEqual(cursor.limit, 4)
        self.assertEqual(cursor.remaining, 4)
        self.assertEqual(cursor.array_offset, 0)
        self.assertEqual(cursor.tobytes(), bytes(4))

    def test_wraps_part_of_backing(self):
        backing = bytearray(b"abcdefgh")
        cursor = ByteCursor(backing, 2, 3)
        self.assertEqual(cursor.array_offset, 2)
        self.assertEqual(cursor.capacity, 3)
        self.assertEqual(len(cursor.array), 8)
        self.assertEqual(cursor.tobytes(), b"cde")

    def test_invalid_region_raises(self):
        with self.assertRaises(ValueError):
            ByteCursor(bytearray(4), 2, 3)
        with self.assertRaises(ValueError):
            ByteCursor.allocate(-1)
        with self.assertRaises(TypeError):
            ByteCursor(b"read only")

    def test_position_bounded_by_limit(self):
        cursor = ByteCursor.allocate(4)
        cursor.limit = 2
        with self.assertRaises(ValueError):
            cursor.position = 3
        cursor.position = 2
        self.assertEqual(cursor.remaining, 0)

    def test_limit_bounded_by_capacity(self):
        cursor = ByteCursor.allocate(4)
        with self.assertRaises(ValueError):
            cursor.limit = 5
        cursor.position = 3
        cursor.limit = 1
        self.assertEqual(cursor.position, 1)

    def test_flip_rewind_clear(self):
        cursor = ByteCursor.allocate(8)
        cursor.position = 5
        cursor.flip()
        self.assertEqual((cursor.position, cursor.limit), (0, 5))
        cursor.position = 3
        cursor.rewind()
        self.assertEqual(cursor.position, 0)
        cursor.clear()
        self.assertEqual((cursor.position, cursor.limit), (0, 8))

    def test_release_frees_backing(self):
        backing = bytearray(4)
        with ByteCursor(backing) as cursor:
            with self.assertRaises(BufferError):
                backing.extend(b"x")
        backing.extend(b"x")
        self.assertEqual(len(backing), 5)
        with self.assertRaises(ValueError):
            cursor.tobytes()


if __name__ == "__main__":
    unittest.main()
