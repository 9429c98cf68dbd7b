from pocket_tagger.main import main

raise SystemExit(main())
