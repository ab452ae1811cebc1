"""Daily learning journal (Jurnal Harian Pembelajaran) resolver and batch generator."""
