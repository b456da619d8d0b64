"""
xgomod Parsing Module.

Readers and writers for the mod-file family:

- syntax: Lossless tokenizer, statement tree and formatter
- ext: Classfile ext tokens, symbols, package paths and quoting
- directives: gox.mod directives -> Manifest
- editor: In-place manifest edits and formatting
- gomod: go.mod reader and writer
"""
