# cauldron_indexer/core/__init__.py
