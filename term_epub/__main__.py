from term_epub.cli.main import main

if __name__ == "__main__":
    main()
