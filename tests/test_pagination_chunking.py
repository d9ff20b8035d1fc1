import math
import pytest
from lazy import Seq


class TestPagination:
    """Test page() and paginate()"""

    def test_basic_pages(self):
        data = Seq.range(1, 21)
        assert data.page(1, 5).collect() == [1, 2, 3, 4, 5]
        assert data.page(2, 5).collect() == [6, 7, 8, 9, 10]
        assert data.page(5, 5).collect() == []

    def test_page_with_filtering(self):
        evens = Seq.range(0, 100).filter(lambda x: x % 2 == 0)
        assert evens.page(1, 5).collect() == [0, 2, 4, 6, 8]
        assert evens.page(2, 5).collect() == [10, 12, 14, 16, 18]

    def test_page_of_unbounded_source(self):
        assert Seq.range(0, math.inf).page(3, 2).collect() == [4, 5]

    def test_invalid_page_number(self):
        with pytest.raises(ValueError):
            Seq.range(0, 10).page(0, 5)

    def test_paginate(self):
        pages = list(Seq.range(1, 51).map(lambda x: x * 2).filter(lambda x: x % 4 == 0).paginate(5))
        assert len(pages) == 5, f"Expected 5 pages, got {len(pages)}"
        assert pages[0] == [4, 8, 12, 16, 20]
        assert pages[-1] == [84, 88, 92, 96, 100]

    def test_paginate_partial_last_page(self):
        pages = list(Seq.range(0, 7).paginate(3))
        assert pages == [[0, 1, 2], [3, 4, 5], [6]]

    def test_paginate_is_lazy(self, pull_log):
        pages = Seq.range(0, 10).inspect(pull_log.append).paginate(4)
        assert pull_log == [], "paginate() should not pull before the first page is requested"
        assert next(pages) == [0, 1, 2, 3]
        assert pull_log == [0, 1, 2, 3]
