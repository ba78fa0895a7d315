"""Navigation algorithms: roving, spatial, corner, seamless, tab, typeahead, recovery."""
