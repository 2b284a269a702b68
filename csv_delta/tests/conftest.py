import os
import sys
from typing import Iterator, Tuple

import pytest

# Ensure local src path is importable
_here = os.path.dirname(os.path.dirname(__file__))  # csv_delta folder
_src = os.path.join(_here, "src")
if os.path.isdir(_src) and _src not in sys.path:
    sys.path.insert(0, _src)


PEOPLE_DIFF = """\
diff --git a/people.csv b/people.csv
index 3b18e51..a0a4f7c 100644
--- a/people.csv
+++ b/people.csv
@@ -1,4 +1,4 @@
 id,name,city
 1,Alice,Paris
-2,Bob,Berlin
-3,Carol,Rome
+3,Carol,Milan
+4,Dave,Oslo
"""

MULTI_FILE_DIFF = PEOPLE_DIFF + """\
diff --git a/README.md b/README.md
index 1111111..2222222 100644
--- a/README.md
+++ b/README.md
@@ -1 +1 @@
-old readme
+new readme
diff --git a/scores.tsv b/scores.tsv
index 3333333..4444444 100644
--- a/scores.tsv
+++ b/scores.tsv
@@ -1,2 +1,2 @@
 team\tscore
-red\t10
+red\t12
"""


@pytest.fixture
def people_diff() -> str:
    """Unified diff of a small CSV file with one removal, one edit and one addition."""
    return PEOPLE_DIFF


@pytest.fixture
def multi_file_diff() -> str:
    """A git diff touching a CSV, a markdown file and a TSV."""
    return MULTI_FILE_DIFF


@pytest.fixture
def csv_file_pair(tmp_path) -> Iterator[Tuple[str, str]]:
    """Write a before/after pair of CSV files and return their paths."""
    before = tmp_path / "before.csv"
    after = tmp_path / "after.csv"
    before.write_text("sku,name,price\nAB-1234,Widget,10\nCD-5678,Gadget,20\n", encoding="utf-8")
    after.write_text("sku,name,price\nAB-1234,Widget,12\nEF-9012,Gizmo,30\n", encoding="utf-8")
    yield str(before), str(after)
