"""W-TinyLFU cache: window LRU, segmented LRU, count-min sketch and doorkeeper."""