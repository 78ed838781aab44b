import glob
import logging
import os
from typing import Any, Dict, List, Optional

import pandas as pd

from .models import VocabItem

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("ko", "fr")


class VocabularyManager:
    """Loads the bundled Korean/French word lists.

    Every ``*.csv`` in ``directory`` needs ``ko`` and ``fr`` columns; an
    optional ``category`` column groups words for topic quizzes. The pool is
    read once and never mutated afterwards.
    """

    def __init__(self, directory: str):
        self.directory = directory
        self.items: List[VocabItem] = []

    def load_all(self):
        items = []
        if not os.path.exists(self.directory):
            logger.warning(f"Vocabulary directory {self.directory} not found.")
            self.items = []
            return

        csv_files = sorted(glob.glob(os.path.join(self.directory, "*.csv")))
        for file_path in csv_files:
            file_name = os.path.splitext(os.path.basename(file_path))[0]
            try:
                df = pd.read_csv(file_path, encoding="utf-8", dtype=str)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load {file_path}: {e}")
                continue
            if not all(col in df.columns for col in REQUIRED_COLUMNS):
                logger.error(f"Skipping {file_name}: Missing columns.")
                continue

            df = df.dropna(subset=list(REQUIRED_COLUMNS))
            for col in REQUIRED_COLUMNS:
                df[col] = df[col].str.strip()
            df = df[(df["ko"] != "") & (df["fr"] != "")].copy()
            if "category" not in df.columns:
                df["category"] = file_name
            df = df.fillna({"category": file_name})
            for row in df.to_dict("records"):
                items.append(VocabItem(ko=row["ko"], fr=row["fr"], category=row["category"]))
            logger.info(f"Loaded {len(df)} words from {file_name}")

        self.items = items

    def get_words(self, category: Optional[str] = None) -> List[VocabItem]:
        if category is None:
            return list(self.items)
        return [item for item in self.items if item.category == category]

    def get_categories(self) -> List[Dict[str, Any]]:
        counts: Dict[str, int] = {}
        for item in self.items:
            counts[item.category] = counts.get(item.category, 0) + 1
        categories = [
            {"id": key, "name": key.replace("_", " ").title(), "count": count}
            for key, count in counts.items()
        ]
        categories.sort(key=lambda x: x["name"])
        return categories
