# NoteHub backend package
