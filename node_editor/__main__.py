from node_editor.cli import main

raise SystemExit(main())
