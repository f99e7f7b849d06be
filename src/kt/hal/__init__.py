"""\
HAL+JSON rendering support library.

"""
