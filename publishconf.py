import os, sys
sys.path.insert(0, os.path.dirname(__file__))
from pelicanconf import *  # noqa

SITEURL = 'https://example.org'
RELATIVE_URLS = False

FEED_ALL_ATOM = 'feeds/all.atom.xml'
CATEGORY_FEED_ATOM = 'feeds/{slug}.atom.xml'
DELETE_OUTPUT_DIRECTORY = True
