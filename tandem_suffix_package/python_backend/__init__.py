'''Pure Python suffix tree backend: text buffer, node arena, Ukkonen builder and queries.'''
