"""
Jotter TUI - generic interactive data browser.

Architecture:
- providers.py: Data and render contracts (protocols)
- browser.py: State machine shared by every browser
- keys.py / render.py: Key routing and pure view rendering
- dispatcher.py / app.py: Command execution (inline or textual workers)
- data_list.py / data_table.py: List- and table-shaped front ends
- views/: Entity adapters (tasks, notes, books, tags, projects, publications)

Extensibility points:
1. New entity browsers: Implement a source and a record adapter in views/
2. New data sources: Implement ListSource or DataSource
3. New record actions: Pass ListAction values in the construction options
"""
